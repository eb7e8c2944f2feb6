"""Core refresh pipeline for git-dir-status"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional, Set, Union

from git_dir_status.config import Config
from git_dir_status.exceptions import (
    GitDirStatusError,
    ParseError,
    ProbeOutputError,
    ProbeSpawnError,
    RenderTargetGoneError,
)
from git_dir_status.host import ListingTarget
from git_dir_status.logging_config import get_logger
from git_dir_status.models.status import StatusSnapshot
from git_dir_status.services.probe import StatusProbe
from git_dir_status.services.renderer import AnnotationRenderer
from git_dir_status.services.table_builder import StatusTableBuilder

logger = get_logger(__name__)

# Longest slice of raw output quoted in a warning
MAX_QUOTED_OUTPUT = 2000


@dataclass(frozen=True)
class RefreshOutcome:
    """Result of one probe -> build -> render chain."""

    target: ListingTarget
    snapshot: Optional[StatusSnapshot] = None
    error: Optional[GitDirStatusError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _quote(text: str) -> str:
    text = text.strip()
    if len(text) > MAX_QUOTED_OUTPUT:
        return text[:MAX_QUOTED_OUTPUT] + "\n..."
    return text


class StatusAnnotator:
    """Annotates directory listings with the git status of their subdirectories."""

    def __init__(
        self,
        config: Optional[Union[Config, dict]] = None,
        on_warning: Optional[Callable[[str], None]] = None,
        probe: Optional[StatusProbe] = None,
        builder: Optional[StatusTableBuilder] = None,
        renderer: Optional[AnnotationRenderer] = None,
    ):
        """Initialize the annotator.

        Args:
            config: Configuration dict or Config object
            on_warning: Called with a user-visible message when a refresh fails
            probe: StatusProbe to use (created from config if omitted)
            builder: StatusTableBuilder to use
            renderer: AnnotationRenderer to use (created from config if omitted)
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config
        self.on_warning = on_warning

        self.probe = probe or StatusProbe(self.config)
        self.builder = builder or StatusTableBuilder()
        self.renderer = renderer or AnnotationRenderer(self.config.annotation)

        self._tasks: Set["asyncio.Task[RefreshOutcome]"] = set()

    def refresh_annotations(self, target: ListingTarget) -> "asyncio.Task[RefreshOutcome]":
        """Start a refresh of target in the background and return immediately.

        Must be called from a running event loop. Refreshes are not
        serialized: a later refresh may finish before an earlier one.
        """
        task = asyncio.ensure_future(self.refresh(target))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait for every refresh started by refresh_annotations."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def refresh(self, target: ListingTarget) -> RefreshOutcome:
        """Run probe, build and render for target, stopping at the first failure.

        Failures are reported through the terminal handler and returned,
        never raised.
        """
        started = time.monotonic()
        try:
            raw_text = await self.probe.probe(target.root_dir)
            snapshot = await self.builder.build(raw_text)
            await self.renderer.render(target, snapshot)
        except GitDirStatusError as e:
            self._report_failure(target, e)
            return RefreshOutcome(target=target, error=e)

        logger.debug(
            f"Refreshed {target.root_dir}: {len(snapshot)} repositories "
            f"in {time.monotonic() - started:.2f}s"
        )
        return RefreshOutcome(target=target, snapshot=snapshot)

    def _report_failure(self, target: ListingTarget, error: GitDirStatusError) -> None:
        """Single terminal handler for every failed chain."""
        if isinstance(error, RenderTargetGoneError):
            logger.debug(f"Listing {target.root_dir} went away before rendering, dropping result")
            return

        if isinstance(error, ProbeSpawnError):
            message = f"Could not run git status probe in {target.root_dir}: {error.reason}"
        elif isinstance(error, ProbeOutputError):
            message = (
                f"Git status probe failed in {target.root_dir}.\n\n"
                f"stderr:\n{_quote(error.raw_err)}"
            )
            if error.raw_out.strip():
                message += f"\n\nstdout:\n{_quote(error.raw_out)}"
        elif isinstance(error, ParseError):
            message = (
                f"Could not parse git status of {target.root_dir}: {error.reason}\n\n"
                f"output:\n{_quote(error.raw_text)}"
            )
        else:
            message = f"Git status refresh of {target.root_dir} failed: {error}"

        logger.warning(message)
        if self.on_warning is not None:
            try:
                self.on_warning(message)
            except Exception as e:
                logger.error(f"Warning callback failed: {e}", exc_info=True)
