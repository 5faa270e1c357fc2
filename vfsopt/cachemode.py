"""Cache modes understood by the overlay's file cache.

off      no local caching, reads and writes go straight to the remote
minimal  only files opened for read and write at the same time are cached
writes   files opened for writing are cached and uploaded on close
full     all file content is cached, reads are served from the cache
"""

from typing import Union

CACHE_MODE_OFF = 0
CACHE_MODE_MINIMAL = 1
CACHE_MODE_WRITES = 2
CACHE_MODE_FULL = 3

CACHE_MODE_NAMES = ("off", "minimal", "writes", "full")


def cache_mode_name(mode: int) -> str:
    if isinstance(mode, int) and 0 <= mode < len(CACHE_MODE_NAMES):
        return CACHE_MODE_NAMES[mode]

    return "CacheMode(%s)" % (mode,)


def cache_mode_from_str(txt: Union[str, int]) -> int:
    """Parse a cache mode by name ("writes") or number ("2").

    Raises ValueError if the mode is unknown.
    """
    if isinstance(txt, int) and not isinstance(txt, bool):
        if 0 <= txt < len(CACHE_MODE_NAMES):
            return txt
        raise ValueError("unknown cache mode %r" % (txt,))

    zs = str(txt).strip().lower()
    if zs in CACHE_MODE_NAMES:
        return CACHE_MODE_NAMES.index(zs)

    if zs.isdigit() and int(zs) < len(CACHE_MODE_NAMES):
        return int(zs)

    raise ValueError(
        "unknown cache mode %r; must be one of %s" % (txt, ", ".join(CACHE_MODE_NAMES))
    )
