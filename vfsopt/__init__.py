"""Options for a virtual-filesystem overlay.

Holds the tunables consumed by the overlay and cache engines, their
defaults, and the one-shot normalization applied before a mount uses them.
"""

from .__version__ import S_VERSION as __version__
from .cachemode import (
    CACHE_MODE_FULL,
    CACHE_MODE_MINIMAL,
    CACHE_MODE_OFF,
    CACHE_MODE_WRITES,
)
from .glob_util import GlobError, glob_to_regex
from .options import (
    VfsOptions,
    build_options,
    case_insensitive_default,
    default_options,
    normalize,
)

__all__ = [
    "CACHE_MODE_FULL",
    "CACHE_MODE_MINIMAL",
    "CACHE_MODE_OFF",
    "CACHE_MODE_WRITES",
    "GlobError",
    "VfsOptions",
    "__version__",
    "build_options",
    "case_insensitive_default",
    "default_options",
    "glob_to_regex",
    "normalize",
]
