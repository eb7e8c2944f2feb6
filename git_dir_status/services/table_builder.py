"""Parse raw probe output into a status table and its column widths."""

import asyncio
import os
import re
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple

from git_dir_status.constants import (
    FIELD_NAMES,
    RECORD_BRANCH,
    RECORD_FAST_FORWARD,
    RECORD_PATH,
    RECORD_REMOTE,
)
from git_dir_status.exceptions import ParseError
from git_dir_status.formatters import display_width
from git_dir_status.logging_config import get_logger
from git_dir_status.models.status import (
    DirectoryStatusRecord,
    FastForward,
    FieldWidths,
    StatusSnapshot,
    normalize_path,
)

logger = get_logger(__name__)

KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_-]*$")


class StatusTableBuilder:
    """Turns the probe's porcelain records into a StatusSnapshot."""

    async def build(self, raw_text: str) -> StatusSnapshot:
        """Parse raw_text on a worker thread.

        Raises:
            ParseError: The text is not a sequence of probe records
        """
        return await asyncio.to_thread(self.parse, raw_text)

    def parse(self, raw_text: str) -> StatusSnapshot:
        """Parse raw_text into a table keyed by path plus per-field widths.

        Unknown keys are ignored and missing fields default to the empty
        string. When a path repeats, the last record wins.

        Raises:
            ParseError: A line is not a key/value pair, or a record has no
                absolute path
        """
        table: Dict[str, DirectoryStatusRecord] = {}

        for fields, line_number in self._split_records(raw_text):
            record = self._make_record(fields, raw_text, line_number)
            if record.path in table:
                logger.debug(f"Duplicate probe record for {record.path}, keeping the last one")
            table[record.path] = record

        widths = self.compute_widths(table.values())
        logger.debug(f"Parsed {len(table)} status records, widths {widths.to_dict()}")
        return StatusSnapshot(table=MappingProxyType(table), widths=widths)

    @staticmethod
    def compute_widths(records) -> FieldWidths:
        """Maximum display width of each aligned field across records."""
        maxima = {name: 0 for name in FIELD_NAMES}
        for record in records:
            for name in FIELD_NAMES:
                maxima[name] = max(maxima[name], display_width(record.field_text(name)))
        return FieldWidths(**maxima)

    def _split_records(self, raw_text: str) -> List[Tuple[Dict[str, str], int]]:
        """Group lines into records separated by blank lines.

        Returns (fields, first line number) for every record.
        """
        records: List[Tuple[Dict[str, str], int]] = []
        current: Dict[str, str] = {}
        start: Optional[int] = None

        for line_number, line in enumerate(raw_text.split("\n"), start=1):
            line = line.rstrip("\r")

            if not line.strip():
                # Blank line marks end of record
                if current:
                    records.append((current, start))
                    current = {}
                    start = None
                continue

            key, _, value = line.partition(" ")
            if not KEY_PATTERN.match(key):
                raise ParseError(raw_text, f"unexpected line {line!r}", line_number)

            if start is None:
                start = line_number
            current[key] = value

        # Handle last record if no trailing blank line
        if current:
            records.append((current, start))

        return records

    def _make_record(
        self, fields: Dict[str, str], raw_text: str, line_number: int
    ) -> DirectoryStatusRecord:
        path = fields.get(RECORD_PATH, "")
        if not path:
            raise ParseError(raw_text, "record without a path", line_number)
        if not os.path.isabs(path):
            raise ParseError(raw_text, f"record path is not absolute: {path!r}", line_number)

        return DirectoryStatusRecord(
            path=normalize_path(path),
            branch=fields.get(RECORD_BRANCH, ""),
            remote=fields.get(RECORD_REMOTE, ""),
            fast_forward=FastForward.parse(fields.get(RECORD_FAST_FORWARD, "")),
        )
