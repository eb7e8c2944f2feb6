"""Status records produced by one probe of a directory listing."""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping


class FastForward(Enum):
    """Whether the local branch tip is a fast-forward of its remote-tracking ref."""
    TRUE = "true"
    FALSE = "false"
    MISSING = "missing"  # remote-tracking ref does not exist

    @classmethod
    def parse(cls, value: str) -> "FastForward":
        """Parse a probe value, treating anything unknown as missing."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.MISSING


def normalize_path(path: str) -> str:
    """Strip trailing slashes so listing rows and probe records share keys."""
    if not path:
        return path
    stripped = path.rstrip("/")
    return stripped or "/"


@dataclass(frozen=True)
class DirectoryStatusRecord:
    """Git status of one immediate subdirectory."""
    path: str
    branch: str = ""
    remote: str = ""
    fast_forward: FastForward = FastForward.MISSING

    def field_text(self, field_name: str) -> str:
        """Return the display text of an aligned field."""
        value = getattr(self, field_name)
        if isinstance(value, FastForward):
            return value.value
        return value


@dataclass(frozen=True)
class FieldWidths:
    """Maximum display width of each aligned field across one StatusTable."""
    branch: int = 0
    remote: int = 0
    fast_forward: int = 0

    def __getitem__(self, field_name: str) -> int:
        return getattr(self, field_name)

    def to_dict(self) -> Dict[str, int]:
        return {
            "branch": self.branch,
            "remote": self.remote,
            "fast_forward": self.fast_forward,
        }


@dataclass(frozen=True)
class StatusSnapshot:
    """A StatusTable together with the FieldWidths computed from it.

    The table is a read-only mapping keyed by normalized directory path.
    A snapshot is never mutated; the next successful probe replaces it.
    """
    table: Mapping[str, DirectoryStatusRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    widths: FieldWidths = field(default_factory=FieldWidths)

    def lookup(self, path: str):
        """Return the record for a listing path, or None."""
        if not path:
            return None
        return self.table.get(normalize_path(path))

    def __len__(self) -> int:
        return len(self.table)
