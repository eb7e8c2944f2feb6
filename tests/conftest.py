"""Pytest fixtures for git-dir-status tests"""
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import git
import pytest

from git_dir_status.config import Config
from git_dir_status.host import ListingBuffer, ListingRow


def _configure(repo: git.Repo) -> git.Repo:
    """Set a commit identity on repo."""
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    return repo


def _commit(repo: git.Repo, filename: str, content: str, message: str) -> None:
    path = Path(repo.working_dir) / filename
    path.write_text(content)
    repo.index.add([filename])
    repo.index.commit(message)


def _init_repo(path: Path) -> git.Repo:
    """Create a repository with one commit on main."""
    path.mkdir(parents=True)
    repo = _configure(git.Repo.init(path))
    _commit(repo, "README.md", "# Test Repository\n", "Initial commit")
    try:
        repo.git.branch("-M", "main")
    except Exception:
        pass
    return repo


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'git_executable': 'git',
        'shell': '/bin/sh',
        'strict_diagnostics': True,
        'show_hidden': False,
        'verbose': False,
        'debug': False,
    }


@pytest.fixture
def workspace(temp_dir):
    """A listing root with one directory per interesting git state.

    root/
        ahead/      clone of upstream on main, tracking origin/main (ff true)
        diverged/   clone on dev, local and upstream dev both moved (ff false)
        detached/   clone with a detached HEAD
        local/      repository without a remote (ff missing)
        plain/      not a repository, holds a nested repository
        notes.txt   a file
    """
    upstream = _init_repo(temp_dir / "upstream")
    upstream.git.checkout("-b", "dev")
    _commit(upstream, "dev.txt", "dev\n", "Start dev")
    upstream.git.checkout("main")

    root = temp_dir / "root"
    root.mkdir()

    ahead = _configure(git.Repo.clone_from(str(upstream.working_dir), str(root / "ahead")))
    _commit(ahead, "local.txt", "local\n", "Local work")

    diverged = _configure(git.Repo.clone_from(str(upstream.working_dir), str(root / "diverged")))
    diverged.git.checkout("dev")
    _commit(diverged, "mine.txt", "mine\n", "Local change")
    upstream.git.checkout("dev")
    _commit(upstream, "theirs.txt", "theirs\n", "Upstream change")
    upstream.git.checkout("main")
    diverged.remotes.origin.fetch()

    detached = _configure(git.Repo.clone_from(str(upstream.working_dir), str(root / "detached")))
    detached.git.checkout(detached.head.commit.hexsha)

    local = _init_repo(root / "local")

    (root / "plain").mkdir()
    nested = _init_repo(root / "plain" / "nested")
    (root / "notes.txt").write_text("not a directory\n")

    yield root

    for repo in (upstream, ahead, diverged, detached, local, nested):
        repo.close()


@pytest.fixture
def listing():
    """An in-memory listing of /repo."""
    rows = [
        ListingRow("..", "/", True),
        ListingRow("a", "/repo/a", True),
        ListingRow("b", "/repo/b", True),
        ListingRow("c", "/repo/c", True),
        ListingRow("notes.txt", "/repo/notes.txt", False),
    ]
    return ListingBuffer("/repo", rows)


@pytest.fixture
def status_output():
    """Raw status script output for two repositories under /repo."""
    return (
        "path /repo/a\n"
        "branch main\n"
        "remote origin\n"
        "ff true\n"
        "\n"
        "path /repo/b\n"
        "branch dev\n"
        "remote origin\n"
        "ff false\n"
        "\n"
    )


@pytest.fixture
def fake_process():
    """Factory for a finished status process with the given streams."""
    def make(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0):
        process = Mock()
        process.returncode = returncode
        process.communicate = AsyncMock(return_value=(stdout, stderr))
        return process

    return make
