"""Shared constants for git-dir-status."""

from typing import Tuple


# Keys of one probe record
RECORD_PATH = "path"
RECORD_BRANCH = "branch"
RECORD_REMOTE = "remote"
RECORD_FAST_FORWARD = "ff"


# DirectoryStatusRecord attributes aligned in columns, in annotation order
FIELD_NAMES: Tuple[str, ...] = ("branch", "remote", "fast_forward")


# Annotation defaults
DEFAULT_MARKER_TAG = "git-dir-status"
DEFAULT_SEPARATOR = "-"
DEFAULT_TRAILER = " "
DEFAULT_ANNOTATION_STYLE = "dim"

# Rich styles per fast-forward state, used by the CLI and TUI hosts
FAST_FORWARD_COLORS = {
    "true": "green",
    "false": "red",
    "missing": "yellow",
}

PARENT_ENTRY = ".."
