"""Configuration handling for git-dir-status"""

from dataclasses import dataclass, field

import git

from git_dir_status.constants import (
    DEFAULT_ANNOTATION_STYLE,
    DEFAULT_MARKER_TAG,
    DEFAULT_SEPARATOR,
    DEFAULT_TRAILER,
)


def default_git_executable() -> str:
    """Git executable resolved by GitPython (honours GIT_PYTHON_GIT_EXECUTABLE)."""
    return getattr(git.Git, "GIT_PYTHON_GIT_EXECUTABLE", None) or "git"


@dataclass(frozen=True)
class AnnotationStyle:
    """Appearance of the annotations placed by AnnotationRenderer."""

    separator: str = DEFAULT_SEPARATOR
    trailer: str = DEFAULT_TRAILER
    style: str = DEFAULT_ANNOTATION_STYLE  # Rich style string
    tag: str = DEFAULT_MARKER_TAG  # Owner tag used to sweep our own markers

    def __post_init__(self):
        if not self.tag:
            raise ValueError("annotation tag cannot be empty")


@dataclass
class Config:
    """Configuration for git-dir-status with validation."""

    # Probe
    git_executable: str = field(default_factory=default_git_executable)
    shell: str = "/bin/sh"
    strict_diagnostics: bool = True  # Any stderr output fails the whole batch

    # Listing
    show_hidden: bool = False

    # Rendering
    annotation: AnnotationStyle = field(default_factory=AnnotationStyle)

    # Output modes
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_git_executable()
        self._validate_shell()
        self._validate_annotation()

    def _validate_git_executable(self):
        """Validate git_executable is not empty."""
        if not self.git_executable or not self.git_executable.strip():
            raise ValueError("git_executable cannot be empty")
        self.git_executable = self.git_executable.strip()

    def _validate_shell(self):
        """Validate shell is not empty."""
        if not self.shell or not self.shell.strip():
            raise ValueError("shell cannot be empty")
        self.shell = self.shell.strip()

    def _validate_annotation(self):
        """Accept a plain dict for the annotation style."""
        if isinstance(self.annotation, dict):
            self.annotation = AnnotationStyle(**self.annotation)
        elif not isinstance(self.annotation, AnnotationStyle):
            raise ValueError("annotation must be an AnnotationStyle or a dict")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "git_executable": self.git_executable,
            "shell": self.shell,
            "strict_diagnostics": self.strict_diagnostics,
            "show_hidden": self.show_hidden,
            "annotation": {
                "separator": self.annotation.separator,
                "trailer": self.annotation.trailer,
                "style": self.annotation.style,
                "tag": self.annotation.tag,
            },
            "verbose": self.verbose,
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        # Extract only known fields
        known_fields = {
            "git_executable",
            "shell",
            "strict_diagnostics",
            "show_hidden",
            "annotation",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
