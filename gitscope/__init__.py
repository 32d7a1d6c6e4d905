"""
gitscope - Structured views over a git repository built from plumbing output
"""

from .__version__ import __version__
from .core import Repository
from .config import Config
from .constants import SKIP_BRANCH, TraversalOrder
from .services.git import parse_blame, parse_conflicts

__all__ = [
    "Repository",
    "Config",
    "SKIP_BRANCH",
    "TraversalOrder",
    "parse_blame",
    "parse_conflicts",
    "__version__",
]
