"""Batched git status probe over the immediate subdirectories of a listing."""

import asyncio
import os
import time
from typing import List, Optional, Union

from git_dir_status.config import Config
from git_dir_status.exceptions import ProbeOutputError, ProbeSpawnError
from git_dir_status.logging_config import get_logger

logger = get_logger(__name__)


# One porcelain-style record per top-level working tree:
#
#   path /abs/root/entry
#   branch main
#   remote origin
#   ff true|false|missing
#   (blank line)
#
# Directories that are not themselves a working tree top level are skipped.
# Noise from the per-directory checks goes to /dev/null so that anything
# left on stderr is a real failure.
PROBE_SCRIPT = r'''
git="$1"
root="${2%/}"
find . -mindepth 1 -maxdepth 1 -type d | LC_ALL=C sort | while IFS= read -r entry; do
    dir="$root/${entry#./}"
    top=$("$git" -C "$dir" rev-parse --show-toplevel 2>/dev/null) || continue
    here=$(cd "$dir" 2>/dev/null && pwd -P) || continue
    [ "$top" = "$here" ] || continue
    branch=$("$git" -C "$dir" symbolic-ref --short -q HEAD)
    remote=""
    if [ -n "$branch" ]; then
        remote=$("$git" -C "$dir" config --get "branch.$branch.remote")
    fi
    ff=missing
    if [ -n "$remote" ] && "$git" -C "$dir" rev-parse -q --verify "refs/remotes/$remote/$branch" >/dev/null; then
        if "$git" -C "$dir" merge-base --is-ancestor "refs/remotes/$remote/$branch" "refs/heads/$branch"; then
            ff=true
        else
            ff=false
        fi
    fi
    printf 'path %s\nbranch %s\nremote %s\nff %s\n\n' "$dir" "$branch" "$remote" "$ff"
done
'''

PROBE_NAME = "git-dir-status-probe"


class StatusProbe:
    """Runs one shell process per refresh and returns its raw output."""

    def __init__(self, config: Optional[Union[Config, dict]] = None):
        """Initialize the probe.

        Args:
            config: Configuration dictionary or Config object
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config

    def build_command(self, root_dir: str) -> List[str]:
        """Return the argv of the probe process for a listing root."""
        return [
            self.config.shell,
            "-c",
            PROBE_SCRIPT,
            PROBE_NAME,
            self.config.git_executable,
            root_dir,
        ]

    async def probe(self, root_dir: str) -> str:
        """Probe every immediate subdirectory of root_dir.

        Both output streams are read to completion before the result is
        judged.

        Args:
            root_dir: Directory whose subdirectories should be probed

        Returns:
            The raw text the probe wrote to stdout

        Raises:
            ProbeSpawnError: The process could not be started
            ProbeOutputError: The process wrote to stderr (strict mode)
        """
        root = os.path.abspath(root_dir)
        command = self.build_command(root)
        started = time.monotonic()

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=root,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.debug(f"Failed to spawn probe in {root}: {e}")
            raise ProbeSpawnError(f"{e.strerror or e} ({root})") from e

        stdout, stderr = await process.communicate()
        raw_out = stdout.decode("utf-8", errors="replace")
        raw_err = stderr.decode("utf-8", errors="replace")

        logger.debug(
            f"Probe of {root} finished in {time.monotonic() - started:.2f}s "
            f"(exit {process.returncode}, {len(raw_out)} bytes out, {len(raw_err)} bytes err)"
        )

        if raw_err:
            if self.config.strict_diagnostics:
                raise ProbeOutputError(raw_out, raw_err)
            logger.warning(f"Ignoring probe diagnostics for {root}: {raw_err.strip()}")
        elif process.returncode:
            logger.debug(f"Probe of {root} exited with status {process.returncode}")

        return raw_out
