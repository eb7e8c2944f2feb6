"""Interactive directory listing for git-dir-status using Textual."""

import os
from typing import Dict, List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Footer, Header, Static

from .__version__ import __version__
from .config import Config
from .core import StatusAnnotator
from .host import ListingRow, list_directory
from .logging_config import get_logger
from .models.annotation import Annotation
from .models.status import normalize_path

logger = get_logger(__name__)

STATUS_COLUMN = "status"
NAME_COLUMN = "name"


class TableListing:
    """One directory shown in a DataTable, usable as a ListingTarget.

    Annotations go into the status column, which sits before the name.
    A listing is closed as soon as the table shows another directory.
    """

    def __init__(self, table: DataTable, root_dir: str, rows: List[ListingRow]):
        self.table = table
        self.root_dir = normalize_path(os.path.abspath(root_dir))
        self.rows = rows
        self._live = True
        self._markers: Dict[int, List[Annotation]] = {}

    def __repr__(self) -> str:
        return f"TableListing({self.root_dir!r})"

    def close(self) -> None:
        self._live = False
        self._markers.clear()

    def row_key(self, row: int) -> str:
        listing_row = self.rows[row]
        return listing_row.name if listing_row.is_parent else listing_row.path

    def populate(self) -> None:
        self.table.clear()
        for index, row in enumerate(self.rows):
            name = Text(row.name + ("/" if row.is_dir else ""), style="bold blue" if row.is_dir else "")
            self.table.add_row("", name, key=self.row_key(index))

    def _show(self, row: int) -> None:
        cell = Text()
        for marker in self._markers.get(row, []):
            cell.append(marker.text, style=marker.style or None)
        self.table.update_cell(self.row_key(row), STATUS_COLUMN, cell, update_width=True)

    # ListingTarget

    def is_live(self) -> bool:
        return self._live and self.table.is_attached

    def visible_rows(self) -> range:
        return range(len(self.rows))

    def row_path(self, row: int) -> Optional[str]:
        if self.rows[row].is_parent:
            return None
        return self.rows[row].path

    def content_start(self, row: int) -> int:
        return 0

    def add_marker(self, annotation: Annotation) -> None:
        self._markers.setdefault(annotation.row, []).append(annotation)
        self._show(annotation.row)

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
        self._show(annotation.row)


class DirectoryStatusApp(App):
    """Browse directories with the git status of each repository shown inline."""

    TITLE = "git-dir-status"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("backspace", "parent", "Parent"),
        Binding("a", "toggle_hidden", "Hidden"),
    ]

    def __init__(self, directory: str, config: Optional[Config] = None):
        super().__init__()
        self.config = config or Config()
        self.directory = normalize_path(os.path.abspath(directory))
        self.annotator = StatusAnnotator(self.config, on_warning=self._warn)
        self.listing: Optional[TableListing] = None

    def compose(self) -> ComposeResult:
        """Create child widgets."""
        yield Header(show_clock=False)
        yield DataTable(id="listing", cursor_type="row", zebra_stripes=True)
        yield Static(id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Set up the table and show the starting directory."""
        self.sub_title = f"v{__version__}"
        table = self.query_one(DataTable)
        table.add_column("Git", key=STATUS_COLUMN)
        table.add_column("Name", key=NAME_COLUMN)
        self.open_directory(self.directory)

    def _warn(self, message: str) -> None:
        self.notify(message, title="git status", severity="warning", timeout=10)

    def open_directory(self, directory: str) -> None:
        """Show directory and start annotating it."""
        try:
            rows = list_directory(directory, self.config.show_hidden)
        except OSError as e:
            logger.warning(f"Cannot list {directory}: {e}")
            self.notify(f"Cannot open {directory}: {e.strerror or e}", severity="error")
            return

        if self.listing is not None:
            self.listing.close()

        table = self.query_one(DataTable)
        self.directory = normalize_path(directory)
        self.listing = TableListing(table, self.directory, rows)
        self.listing.populate()
        self.query_one("#status-bar", Static).update(self.directory)
        self.annotator.refresh_annotations(self.listing)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter the selected directory."""
        if self.listing is None:
            return
        row = self.listing.rows[event.cursor_row]
        if row.is_dir:
            self.open_directory(row.path)

    def action_parent(self) -> None:
        self.open_directory(os.path.dirname(self.directory))

    def action_refresh(self) -> None:
        """Re-list the current directory and probe it again."""
        self.open_directory(self.directory)

    def action_toggle_hidden(self) -> None:
        self.config.show_hidden = not self.config.show_hidden
        self.open_directory(self.directory)

    async def action_quit(self) -> None:
        """Close the listing so in-flight refreshes drop their results."""
        if self.listing is not None:
            self.listing.close()
        self.exit()
