"""
git-dir-status - Annotate directory listings with the git status of each subdirectory
"""

from .__version__ import __version__
from .core import StatusAnnotator, RefreshOutcome
from .cli.main import main

__all__ = ["StatusAnnotator", "RefreshOutcome", "main", "__version__"]
