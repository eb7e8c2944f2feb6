"""The narrow interface the pipeline needs from a directory listing.

A listing host owns its rows and their lifecycle. The pipeline only reads
row paths and places or removes its own markers.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from rich.text import Text

from git_dir_status.constants import PARENT_ENTRY
from git_dir_status.models.annotation import Annotation
from git_dir_status.models.status import normalize_path


class ListingTarget(Protocol):
    """A displayed directory listing that can carry annotations."""

    root_dir: str

    def is_live(self) -> bool:
        """False once the listing has been closed or replaced."""
        ...

    def visible_rows(self) -> range:
        """Indices of the rows currently displayed."""
        ...

    def row_path(self, row: int) -> Optional[str]:
        """Absolute path shown on row, or None for rows without one."""
        ...

    def content_start(self, row: int) -> int:
        """Column where the row's name begins."""
        ...

    def add_marker(self, annotation: Annotation) -> None:
        ...

    def markers_in_range(self, start: int, end: int, tag: str) -> List[Annotation]:
        """Markers with the given tag on rows start (inclusive) to end (exclusive)."""
        ...

    def remove_marker(self, annotation: Annotation) -> None:
        ...


@dataclass(frozen=True)
class ListingRow:
    """One entry of a directory listing."""

    name: str
    path: str
    is_dir: bool

    @property
    def is_parent(self) -> bool:
        return self.name == PARENT_ENTRY

    @property
    def prefix(self) -> str:
        return "d " if self.is_dir else "- "


def list_directory(root_dir: str, show_hidden: bool = False) -> List[ListingRow]:
    """
    Read the entries of root_dir, directories first.

    Args:
        root_dir: Directory to list
        show_hidden: Include entries whose name starts with a dot

    Returns:
        A parent entry followed by the sorted entries of root_dir
    """
    root = normalize_path(os.path.abspath(root_dir))
    rows = [ListingRow(PARENT_ENTRY, os.path.dirname(root), True)]
    entries = []
    with os.scandir(root) as it:
        for entry in it:
            if not show_hidden and entry.name.startswith("."):
                continue
            entries.append(ListingRow(entry.name, os.path.join(root, entry.name), entry.is_dir()))
    entries.sort(key=lambda row: (not row.is_dir, row.name))
    return rows + entries


class ListingBuffer:
    """In-memory listing used by the console output and by tests."""

    def __init__(self, root_dir: str, rows: List[ListingRow], height: Optional[int] = None):
        """Initialize the buffer.

        Args:
            root_dir: Directory the listing shows
            rows: Entries in display order
            height: Number of rows displayed at once (None shows all)
        """
        self.root_dir = normalize_path(os.path.abspath(root_dir))
        self.rows = rows
        self.height = height
        self.top = 0
        self._live = True
        self._markers: Dict[int, List[Annotation]] = {}

    @classmethod
    def from_directory(cls, root_dir: str, show_hidden: bool = False, height: Optional[int] = None):
        return cls(root_dir, list_directory(root_dir, show_hidden), height=height)

    def __repr__(self) -> str:
        return f"ListingBuffer({self.root_dir!r})"

    def close(self) -> None:
        """Invalidate the listing and drop every marker on it."""
        self._live = False
        self._markers.clear()

    def scroll_to(self, top: int) -> None:
        self.top = max(0, min(top, len(self.rows) - 1))

    # ListingTarget

    def is_live(self) -> bool:
        return self._live

    def visible_rows(self) -> range:
        if self.height is None:
            return range(len(self.rows))
        return range(self.top, min(len(self.rows), self.top + self.height))

    def row_path(self, row: int) -> Optional[str]:
        listing_row = self.rows[row]
        if listing_row.is_parent:
            return None
        return listing_row.path

    def content_start(self, row: int) -> int:
        return len(self.rows[row].prefix)

    def add_marker(self, annotation: Annotation) -> None:
        self._markers.setdefault(annotation.row, []).append(annotation)

    def markers_in_range(self, start: int, end: int, tag: str) -> List[Annotation]:
        return [
            marker
            for row in range(start, end)
            for marker in self._markers.get(row, [])
            if marker.tag == tag
        ]

    def remove_marker(self, annotation: Annotation) -> None:
        markers = self._markers.get(annotation.row, [])
        if annotation in markers:
            markers.remove(annotation)
        if not markers:
            self._markers.pop(annotation.row, None)

    # Display

    def markers(self, row: int) -> List[Annotation]:
        return list(self._markers.get(row, []))

    def render_line(self, row: int) -> Text:
        """Row text with its markers inserted at their columns."""
        listing_row = self.rows[row]
        plain = listing_row.prefix + listing_row.name + ("/" if listing_row.is_dir else "")
        line = Text()
        cursor = 0
        for marker in sorted(self.markers(row), key=lambda m: m.column):
            line.append(plain[cursor:marker.column])
            line.append(marker.text, style=marker.style or None)
            cursor = max(cursor, marker.column)
        line.append(plain[cursor:], style="bold blue" if listing_row.is_dir else None)
        return line

    def render_lines(self) -> List[Text]:
        return [self.render_line(row) for row in self.visible_rows()]
