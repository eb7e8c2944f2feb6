"""Places status annotations on the rows of a directory listing."""

import asyncio
import weakref
from typing import Dict, Optional

from git_dir_status.config import AnnotationStyle
from git_dir_status.exceptions import RenderTargetGoneError
from git_dir_status.formatters import annotation_rich_style, format_annotation
from git_dir_status.host import ListingTarget
from git_dir_status.logging_config import get_logger
from git_dir_status.models.annotation import Annotation
from git_dir_status.models.status import StatusSnapshot

logger = get_logger(__name__)


class AnnotationRenderer:
    """Sweeps and reapplies annotations for one StatusSnapshot at a time.

    The renderer keeps its own registry of the annotations it placed, per
    target and by row. Renders never interleave; each one finishes before
    the next starts, but yields to the event loop between rows.
    """

    def __init__(self, style: Optional[AnnotationStyle] = None):
        """Initialize the renderer.

        Args:
            style: Appearance and owner tag of the annotations
        """
        self.style = style or AnnotationStyle()
        self._registry: "weakref.WeakKeyDictionary[ListingTarget, Dict[int, Annotation]]" = (
            weakref.WeakKeyDictionary()
        )
        self._lock = asyncio.Lock()

    def annotations_for(self, target: ListingTarget) -> Dict[int, Annotation]:
        """Annotations this renderer currently has on target, keyed by row."""
        return dict(self._registry.get(target, {}))

    def forget(self, target: ListingTarget) -> None:
        """Drop the registry entry of a target that went away."""
        self._registry.pop(target, None)

    def sweep(self, target: ListingTarget) -> int:
        """Remove our annotations from target.

        Covers everything this renderer placed, including rows scrolled out
        of view since, plus any marker with our tag in the visible range.

        Returns:
            Number of annotations removed
        """
        rows = target.visible_rows()
        stale = list(self._registry.pop(target, {}).values())
        for marker in target.markers_in_range(rows.start, rows.stop, self.style.tag):
            if marker not in stale:
                stale.append(marker)

        for marker in stale:
            target.remove_marker(marker)
        return len(stale)

    async def render(self, target: ListingTarget, snapshot: StatusSnapshot) -> None:
        """Annotate every visible row of target that has an entry in snapshot.

        Raises:
            RenderTargetGoneError: target was closed before or during the render
        """
        async with self._lock:
            if not target.is_live():
                self.forget(target)
                raise RenderTargetGoneError(target)

            removed = self.sweep(target)
            owned = self._registry.setdefault(target, {})
            placed = 0

            for row in target.visible_rows():
                # Let the host handle input between rows
                await asyncio.sleep(0)
                if not target.is_live():
                    self.forget(target)
                    raise RenderTargetGoneError(target)

                record = snapshot.lookup(target.row_path(row))
                if record is None:
                    continue

                annotation = Annotation(
                    row=row,
                    column=target.content_start(row),
                    text=format_annotation(record, snapshot.widths, self.style),
                    tag=self.style.tag,
                    style=annotation_rich_style(record, self.style),
                )
                target.add_marker(annotation)
                owned[row] = annotation
                placed += 1

            logger.debug(f"Rendered {placed} annotations on {target} (swept {removed})")
