"""The options record handed to the overlay and cache engines.

Build one with default_options(), apply overrides (directly or through
config.OptionConverter), then call normalize() exactly once before the
record is shared. Downstream consumers treat it as read-only.
"""

import os
import sys
from typing import Any, List, Optional, Pattern, Tuple

from .cachemode import CACHE_MODE_OFF, cache_mode_name
from .config.flag_converter import OptionConverter
from .config.normalizer import OptionNormalizer
from .time_util import fmt_duration, fmt_size
from .util import make_logger

MEBI = 1024 * 1024


# platforms where filenames are case-insensitive by default
CASE_INSENSITIVE_PLATFORMS = ("win32", "cygwin", "msys", "darwin")


def case_insensitive_default(plat: Optional[str] = None) -> bool:
    """True on windows and macos, False anywhere else"""
    if plat is None:
        plat = sys.platform

    return plat in CASE_INSENSITIVE_PLATFORMS


class VfsOptions(object):
    """Tunables for a VFS overlay.

    Sizes are bytes, with None meaning unbounded/unset; durations are
    seconds; uid/gid None means the owner is the current user/group.

    exclude_patterns is filled in by normalize() from upload_exclude and
    cannot be assigned.
    """

    # every public field, in display order
    FIELDS = (
        "no_seek",
        "no_checksum",
        "read_only",
        "no_mod_time",
        "dir_cache_time",
        "poll_interval",
        "umask",
        "uid",
        "gid",
        "dir_perms",
        "file_perms",
        "chunk_size",
        "chunk_size_limit",
        "cache_mode",
        "cache_max_age",
        "cache_max_size",
        "cache_min_free_space",
        "cache_poll_interval",
        "case_insensitive",
        "write_wait",
        "read_wait",
        "write_back",
        "read_ahead",
        "used_is_size",
        "fast_fingerprint",
        "disk_space_total_size",
        "upload_exclude",
    )

    def __init__(self, **ka: Any) -> None:
        self.no_seek = False
        self.no_checksum = False
        self.read_only = False
        self.no_mod_time = False
        self.dir_cache_time = 300.0
        self.poll_interval = 60.0
        self.umask = 0
        self.uid: Optional[int] = None
        self.gid: Optional[int] = None
        self.dir_perms = 0o777
        self.file_perms = 0o666
        self.chunk_size: Optional[int] = 128 * MEBI
        # if larger than chunk_size, chunks double in size until this is reached
        self.chunk_size_limit: Optional[int] = None
        self.cache_mode = CACHE_MODE_OFF
        self.cache_max_age = 3600.0
        self.cache_max_size: Optional[int] = None
        self.cache_min_free_space: Optional[int] = None
        self.cache_poll_interval = 60.0
        self.case_insensitive = case_insensitive_default()
        self.write_wait = 1.0
        self.read_wait = 0.02
        self.write_back = 5.0
        self.read_ahead = 0
        self.used_is_size = False
        self.fast_fingerprint = False
        self.disk_space_total_size: Optional[int] = None
        self.upload_exclude: List[str] = []

        self._exclude_patterns: List[Pattern[str]] = []
        self._normalized = False

        for k, v in ka.items():
            if k not in self.FIELDS:
                raise TypeError("unknown vfs option %r" % (k,))
            setattr(self, k, v)

    def __repr__(self) -> str:
        return "VfsOptions(%s)" % (
            ", ".join("%s=%r" % (k, getattr(self, k)) for k in self.FIELDS),
        )

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VfsOptions):
            return NotImplemented

        return self.to_dict() == other.to_dict() and [
            x.pattern for x in self._exclude_patterns
        ] == [x.pattern for x in other._exclude_patterns]

    __hash__ = None  # type: ignore

    @property
    def exclude_patterns(self) -> List[Pattern[str]]:
        return list(self._exclude_patterns)

    @property
    def is_normalized(self) -> bool:
        return self._normalized

    def copy(self) -> "VfsOptions":
        ret = VfsOptions.__new__(VfsOptions)
        ret.__dict__.update(self.__dict__)
        ret.upload_exclude = list(self.upload_exclude)
        ret._exclude_patterns = list(self._exclude_patterns)
        return ret

    def to_dict(self) -> dict[str, Any]:
        ret = {k: getattr(self, k) for k in self.FIELDS}
        ret["upload_exclude"] = list(self.upload_exclude)
        return ret

    def describe(self) -> List[str]:
        """human-readable summary, one option per line"""
        ret = []
        for k in self.FIELDS:
            v = getattr(self, k)
            if k in ("umask", "dir_perms", "file_perms"):
                zs = "%04o" % (v,)
            elif k == "cache_mode":
                zs = cache_mode_name(v)
            elif k in ("uid", "gid"):
                zs = "inherit" if v is None else str(v)
            elif k in (
                "chunk_size",
                "chunk_size_limit",
                "cache_max_size",
                "cache_min_free_space",
                "read_ahead",
                "disk_space_total_size",
            ):
                zs = fmt_size(v)
            elif isinstance(v, float):
                zs = fmt_duration(v)
            elif isinstance(v, list):
                zs = ", ".join(v) or "-"
            else:
                zs = str(v).lower()

            ret.append("%s: %s" % (k.replace("_", "-"), zs))

        return ret

    def owner(self) -> Tuple[Optional[int], Optional[int]]:
        """uid and gid to present, resolving "inherit" where the os allows"""
        uid, gid = self.uid, self.gid
        if uid is None and hasattr(os, "getuid"):
            uid = os.getuid()
        if gid is None and hasattr(os, "getgid"):
            gid = os.getgid()

        return uid, gid

    def upload_excluded(self, rel_path: str) -> bool:
        """True if the path should be kept out of the upload queue"""
        for ptn in self._exclude_patterns:
            if ptn.search(rel_path):
                return True

        return False


def default_options(plat: Optional[str] = None) -> VfsOptions:
    """A fresh record with the default value of every option.

    Args:
        plat: Platform identifier as in sys.platform; decides the
            case-insensitivity default (defaults to the host)
    """
    return VfsOptions(case_insensitive=case_insensitive_default(plat))


def normalize(opt: VfsOptions, log_func: Optional[Any] = None) -> VfsOptions:
    """Apply the umask, mark directories, and compile upload_exclude.

    Mutates and returns opt. Bad globs are logged and skipped; nothing
    here raises.

    Args:
        opt: Options to normalize; must not have been normalized before
        log_func: Function for logging messages (msg, level);
            defaults to the "vfsopt" logger
    """
    return OptionNormalizer(log_func or make_logger()).normalize(opt)


def build_options(
    flags: Optional[dict[str, Any]] = None,
    log_func: Optional[Any] = None,
    plat: Optional[str] = None,
) -> VfsOptions:
    """Defaults, then flags on top, then normalize; the usual way to get options.

    Args:
        flags: Dict of flag name -> value, see config.flag_converter.FLAGS
        log_func: Function for logging messages (msg, level)
        plat: Platform identifier as in sys.platform

    Raises:
        ValueError: If a umask/permission flag is malformed
    """
    log = log_func or make_logger()
    opt = default_options(plat)
    if flags:
        OptionConverter(log).apply_flags(opt, flags)

    return OptionNormalizer(log).normalize(opt)
