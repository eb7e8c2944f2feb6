"""Tests for Config and annotation formatting"""
import git
import pytest

from git_dir_status.config import AnnotationStyle, Config, default_git_executable
from git_dir_status.formatters import display_width, format_annotation, pad_cells
from git_dir_status.models.status import (
    DirectoryStatusRecord,
    FastForward,
    FieldWidths,
    normalize_path,
)


class TestConfig:
    """Test configuration validation."""

    def test_defaults(self):
        config = Config()
        assert config.strict_diagnostics is True
        assert config.shell == "/bin/sh"
        assert config.annotation == AnnotationStyle()

    def test_git_executable_from_gitpython(self, monkeypatch):
        monkeypatch.setattr(git.Git, "GIT_PYTHON_GIT_EXECUTABLE", "/usr/local/bin/git")
        assert default_git_executable() == "/usr/local/bin/git"
        assert Config().git_executable == "/usr/local/bin/git"

    def test_git_executable_fallback(self, monkeypatch):
        monkeypatch.setattr(git.Git, "GIT_PYTHON_GIT_EXECUTABLE", None)
        assert default_git_executable() == "git"

    def test_empty_git_executable(self):
        with pytest.raises(ValueError, match="git_executable"):
            Config(git_executable="  ")

    def test_empty_shell(self):
        with pytest.raises(ValueError, match="shell"):
            Config(shell="")

    def test_empty_tag(self):
        with pytest.raises(ValueError, match="tag"):
            AnnotationStyle(tag="")

    def test_from_dict_ignores_unknown_keys(self, mock_config):
        mock_config["unknown"] = True
        config = Config.from_dict(mock_config)
        assert config.git_executable == "git"
        assert not hasattr(config, "unknown")

    def test_annotation_from_dict(self):
        config = Config.from_dict({"annotation": {"separator": "/", "style": ""}})
        assert config.annotation.separator == "/"
        assert config.annotation.tag == "git-dir-status"

    def test_round_trip(self, mock_config):
        config = Config.from_dict(mock_config)
        assert Config.from_dict(config.to_dict()) == config


class TestFormatting:
    """Test annotation text formatting."""

    def test_pad_cells_counts_wide_characters(self):
        assert pad_cells("機能", 6) == "機能  "
        assert display_width(pad_cells("機能", 6)) == 6

    def test_pad_cells_never_truncates(self):
        assert pad_cells("feature", 3) == "feature"

    def test_format_annotation(self):
        record = DirectoryStatusRecord("/r/a", "main", "origin", FastForward.MISSING)
        widths = FieldWidths(branch=6, remote=6, fast_forward=7)
        assert format_annotation(record, widths, AnnotationStyle()) == "main  -origin-missing "


class TestModels:
    """Test status model helpers."""

    @pytest.mark.parametrize(
        "path,expected",
        [("/repo/a/", "/repo/a"), ("/repo/a", "/repo/a"), ("/", "/"), ("//", "/"), ("", "")],
    )
    def test_normalize_path(self, path, expected):
        assert normalize_path(path) == expected

    def test_fast_forward_parse(self):
        assert FastForward.parse("true") is FastForward.TRUE
        assert FastForward.parse(" FALSE ") is FastForward.FALSE
        assert FastForward.parse("") is FastForward.MISSING
