"""Command-line argument parsing for git-dir-status."""

import argparse
from git_dir_status.__version__ import __version__


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="List a directory with the git branch, remote and fast-forward state "
        "of every repository directly inside it",
    )
    parser.add_argument(
        "directory", nargs="?", default=".", help="Directory to list (default: current directory)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-dir-status {__version__}")
    parser.add_argument(
        "-a", "--all", action="store_true", help="Show entries whose names start with a dot"
    )
    parser.add_argument("--git", metavar="PATH", help="Git executable used by the probe")
    parser.add_argument(
        "--relaxed",
        action="store_true",
        help="Keep probe results even if git printed errors (default: any error fails the batch)",
    )
    parser.add_argument(
        "--interactive", action="store_true", help="Launch interactive TUI mode (default for TTY)"
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Force non-interactive output (for scripts/automation)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )

    return parser.parse_args(argv)
