"""Turning supplied settings into a ready-to-use VfsOptions.

Modules:
- flag_converter: Convert flag values (CLI / config file) onto the options
- normalizer: One-shot normalization (umask, directory bit, exclude globs)
"""

from .flag_converter import OptionConverter, parse_flag_lines, split_flag_line
from .normalizer import OptionNormalizer

__all__ = [
    "OptionConverter",
    "OptionNormalizer",
    "parse_flag_lines",
    "split_flag_line",
]
