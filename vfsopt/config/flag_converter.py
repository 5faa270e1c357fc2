"""Apply externally supplied option values to a VfsOptions.

Values come from the command line or a config file as strings (or as
already-typed python values) and are converted to the type of each option.
"""

import re
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional

from ..cachemode import cache_mode_from_str
from ..time_util import parse_duration, unhumanize

if TYPE_CHECKING:
    from ..options import VfsOptions

ID_INHERIT = 0xFFFFFFFF

RE_OCTAL = re.compile(r"^0?o?[0-7]{1,4}$")

# flag name -> (attribute, kind)
FLAGS = {
    "no-seek": ("no_seek", "bool"),
    "no-checksum": ("no_checksum", "bool"),
    "read-only": ("read_only", "bool"),
    "no-modtime": ("no_mod_time", "bool"),
    "dir-cache-time": ("dir_cache_time", "dur"),
    "poll-interval": ("poll_interval", "dur"),
    "umask": ("umask", "octal"),
    "uid": ("uid", "id"),
    "gid": ("gid", "id"),
    "dir-perms": ("dir_perms", "octal"),
    "file-perms": ("file_perms", "octal"),
    "vfs-read-chunk-size": ("chunk_size", "osize"),
    "vfs-read-chunk-size-limit": ("chunk_size_limit", "osize"),
    "vfs-cache-mode": ("cache_mode", "cachemode"),
    "vfs-cache-max-age": ("cache_max_age", "dur"),
    "vfs-cache-max-size": ("cache_max_size", "osize"),
    "vfs-cache-min-free-space": ("cache_min_free_space", "osize"),
    "vfs-cache-poll-interval": ("cache_poll_interval", "dur"),
    "vfs-case-insensitive": ("case_insensitive", "bool"),
    "vfs-write-wait": ("write_wait", "dur"),
    "vfs-read-wait": ("read_wait", "dur"),
    "vfs-write-back": ("write_back", "dur"),
    "vfs-read-ahead": ("read_ahead", "size"),
    "vfs-used-is-size": ("used_is_size", "bool"),
    "vfs-fast-fingerprint": ("fast_fingerprint", "bool"),
    "vfs-disk-space-total-size": ("disk_space_total_size", "osize"),
    "vfs-upload-exclude": ("upload_exclude", "list"),
}

# the attribute names work too ("cache-max-size", "no-mod-time", ...)
FLAG_ALIASES = {attr.replace("_", "-"): (attr, kind) for attr, kind in FLAGS.values()}

BOOL_TRUE = ("1", "true", "yes", "on", "y")
BOOL_FALSE = ("0", "false", "no", "off", "n", "")


def canonical_flag(name: str) -> str:
    return name.strip().lstrip("-").lower().replace("_", "-")


def lookup_flag(name: str) -> Optional[tuple]:
    k = canonical_flag(name)
    return FLAGS.get(k) or FLAG_ALIASES.get(k)


def parse_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v

    zs = str(v).strip().lower()
    if zs in BOOL_TRUE:
        return True
    if zs in BOOL_FALSE:
        return False

    raise ValueError("not a boolean: %r" % (v,))


def parse_id(v: Any) -> Optional[int]:
    if isinstance(v, str):
        zs = v.strip().lower()
        if zs in ("", "inherit"):
            return None
        v = int(zs, 0)

    if v is None or v == -1 or v == ID_INHERIT:
        return None

    if not isinstance(v, int) or isinstance(v, bool) or not 0 <= v < ID_INHERIT:
        raise ValueError("not a valid uid/gid: %r" % (v,))

    return v


def parse_list(v: Any) -> List[str]:
    """Split "*.tmp, {a,b}.part" on the commas which are not inside braces"""
    if not isinstance(v, str):
        return [str(x) for x in v]

    ret = []
    cur = ""
    depth = 0
    for c in v:
        if c == "{":
            depth += 1
        elif c == "}" and depth:
            depth -= 1
        elif c == "," and not depth:
            ret.append(cur)
            cur = ""
            continue
        cur += c

    ret.append(cur)
    return [x.strip() for x in ret if x.strip()]


def split_flag_line(ln: str) -> Dict[str, Any]:
    # "a, b, c: 3" => {a:true, b:true, c:3}
    ret: Dict[str, Any] = {}
    while True:
        ln = ln.strip()
        if not ln:
            break

        ofs_sep = ln.find(",") + 1
        ofs_var = ln.find(":") + 1
        if not ofs_sep and not ofs_var:
            ret[ln] = True
            break

        if ofs_sep and (ofs_sep < ofs_var or not ofs_var):
            k, ln = ln.split(",", 1)
            ret[k.strip()] = True
        else:
            k, ln = ln.split(":", 1)
            ret[k.strip()] = ln.strip()
            break

    return ret


def parse_flag_lines(lines: Iterable[str]) -> Dict[str, Any]:
    """Collect flags from config-file lines; blank lines and #comments are skipped.

    Repeated vfs-upload-exclude lines accumulate instead of replacing.
    """
    ret: Dict[str, Any] = {}
    for ln in lines:
        ln = ln.strip()
        if not ln or ln.startswith("#"):
            continue

        for k, v in split_flag_line(ln).items():
            hit = lookup_flag(k)
            if hit and hit[1] == "list" and k in ret:
                ret[k] = parse_list(ret[k]) + parse_list(v)
            else:
                ret[k] = v

    return ret


class OptionConverter:
    """Convert flag values and store them on a VfsOptions."""

    def __init__(self, log_func: Callable[[str, int], None]):
        """Initialize converter with logging function.

        Args:
            log_func: Function for logging messages (msg, level)
        """
        self.log = log_func

    def convert_value(self, kind: str, v: Any) -> Any:
        """Convert a single value; raises ValueError if it does not parse."""
        if kind == "bool":
            return parse_bool(v)
        if kind == "dur":
            return parse_duration(v)
        if kind == "osize":
            return unhumanize(v)
        if kind == "size":
            ret = unhumanize(v)
            if ret is None:
                raise ValueError("this size cannot be off")
            return ret
        if kind == "id":
            return parse_id(v)
        if kind == "cachemode":
            return cache_mode_from_str(v)
        if kind == "list":
            return parse_list(v)
        raise ValueError("unknown option kind %r" % (kind,))

    def convert_octal(self, k: str, v: Any) -> int:
        """Convert a permission or umask value.

        Raises:
            ValueError: If the value is not an octal number such as 022 or 0755
        """
        if isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 0o7777:
            return v

        zs = str(v).strip().lower()
        if not RE_OCTAL.match(zs):
            msg = (
                f"vfs option '{k}' must be an octal value "
                f"such as [022] or [0755] but the value was [{v}]"
            )
            self.log(msg, 1)
            raise ValueError(msg)

        return int(zs.replace("o", ""), 8)

    def apply_flags(self, opt: "VfsOptions", flags: Dict[str, Any]) -> List[str]:
        """Store each recognized flag on opt.

        Unknown flags are reported once and ignored; values which do not
        parse are reported and the option keeps its previous value.

        Args:
            opt: Options to update, not yet normalized
            flags: Dict of flag name -> value

        Returns:
            Attribute names which were changed

        Raises:
            ValueError: On a malformed umask/permission value, or if opt
                was already normalized
        """
        if opt.is_normalized:
            raise ValueError("cannot apply flags to vfs options which were already normalized")

        unknown = []
        ret = []
        for k, v in flags.items():
            hit = lookup_flag(k)
            if not hit:
                unknown.append(k)
                continue

            attr, kind = hit
            if kind == "octal":
                setattr(opt, attr, self.convert_octal(k, v))
                ret.append(attr)
                continue

            try:
                zv = self.convert_value(kind, v)
            except ValueError as ex:
                self.log(f"invalid value for vfs option '{k}': {ex}", 1)
                continue

            if kind == "list":
                opt.upload_exclude.extend(zv)
            else:
                setattr(opt, attr, zv)

            ret.append(attr)

        if unknown:
            zs = "', '".join(unknown)
            self.log(f"unrecognized vfs options; will ignore: '{zs}'", 3)

        return ret
