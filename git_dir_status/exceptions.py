"""Failure kinds raised by the git-dir-status pipeline stages."""

from typing import Any, Optional


class GitDirStatusError(Exception):
    """Base exception for all git-dir-status errors."""
    pass


class ProbeError(GitDirStatusError):
    """Base exception for failures of the batched status probe."""
    pass


class ProbeSpawnError(ProbeError):
    """Exception raised when the probe process could not be started."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Could not start status probe: {reason}")


class ProbeOutputError(ProbeError):
    """Exception raised when the probe wrote anything to its diagnostic stream."""

    def __init__(self, raw_out: str, raw_err: str):
        self.raw_out = raw_out
        self.raw_err = raw_err

        first_line = raw_err.strip().splitlines()[0] if raw_err.strip() else "diagnostic output"
        super().__init__(f"Status probe reported errors: {first_line}")


class ParseError(GitDirStatusError):
    """Exception raised when probe output cannot be parsed into records."""

    def __init__(self, raw_text: str, reason: str, line_number: Optional[int] = None):
        self.raw_text = raw_text
        self.reason = reason
        self.line_number = line_number

        error_msg = f"Could not parse probe output: {reason}"
        if line_number is not None:
            error_msg += f" (line {line_number})"

        super().__init__(error_msg)


class RenderTargetGoneError(GitDirStatusError):
    """Exception raised when the listing was closed before rendering finished."""

    def __init__(self, target: Any = None):
        self.target = target
        super().__init__("Listing was closed before annotations could be rendered")
