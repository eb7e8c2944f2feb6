"""Command-line interface for git-dir-status"""

import asyncio
import os
import sys

from rich.console import Console
from rich.markup import escape

from git_dir_status.cli.args import parse_args
from git_dir_status.config import Config
from git_dir_status.core import StatusAnnotator
from git_dir_status.host import ListingBuffer
from git_dir_status.logging_config import setup_logging

console = Console()
error_console = Console(stderr=True)


async def annotate_listing(directory: str, config: Config) -> int:
    """Print one annotated listing of directory.

    Returns:
        Process exit code
    """
    buffer = ListingBuffer.from_directory(directory, show_hidden=config.show_hidden)

    def warn(message: str) -> None:
        error_console.print(f"[yellow]Warning:[/yellow] {escape(message)}", highlight=False)

    annotator = StatusAnnotator(config, on_warning=warn)
    outcome = await annotator.refresh(buffer)

    for line in buffer.render_lines():
        console.print(line, highlight=False)

    return 0 if outcome.ok else 1


def main(argv=None):
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config_values = {
            "strict_diagnostics": not parsed_args.relaxed,
            "show_hidden": parsed_args.all,
            "verbose": parsed_args.verbose,
            "debug": parsed_args.debug,
        }
        if parsed_args.git:
            config_values["git_executable"] = parsed_args.git
        config = Config.from_dict(config_values)

        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        directory = os.path.abspath(parsed_args.directory)
        if not os.path.isdir(directory):
            error_console.print(f"[red]Error: not a directory: {escape(directory)}[/red]")
            return 1

        # Default to interactive on a TTY unless explicitly disabled
        use_interactive = parsed_args.interactive or (
            sys.stdin.isatty() and sys.stdout.isatty() and not parsed_args.no_interactive
        )

        if use_interactive:
            # The TUI owns the terminal, so log to file only
            setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug, tui_mode=True)
            from git_dir_status.tui import DirectoryStatusApp
            app = DirectoryStatusApp(directory, config)
            app.run()
            return 0

        return asyncio.run(annotate_listing(directory, config))
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        error_console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args is not None and parsed_args.debug:
            error_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
