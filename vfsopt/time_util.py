"""Size and duration conversions for option values.

Sizes are byte counts; "off" means unbounded and is returned as None.
Durations are float seconds.
"""

import math
import re
from typing import Optional, Union


HUMANSIZE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")

UNHUMANIZE_UNITS = {
    "b": 1,
    "k": 1024,
    "m": 1024 * 1024,
    "g": 1024 * 1024 * 1024,
    "t": 1024 * 1024 * 1024 * 1024,
    "p": 1024 * 1024 * 1024 * 1024 * 1024,
    "e": 1024 * 1024 * 1024 * 1024 * 1024 * 1024,
}

DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "d": 86400.0,
    "w": 7 * 86400.0,
    "M": 30 * 86400.0,
    "y": 365 * 86400.0,
}

# what "off" means for a duration
DURATION_OFF = 100 * 365 * 86400.0

RE_SIZE = re.compile(r"^([0-9]*\.?[0-9]+)([bkmgtpe]?)(i?b?)$")
RE_DUR_PART = re.compile(r"([0-9]*\.?[0-9]+)(ns|us|µs|ms|s|m|h|d|w|M|y)")


def humansize(sz: float, terse: bool = False) -> str:
    for unit in HUMANSIZE_UNITS:
        if sz < 1024:
            break

        sz /= 1024.0

    if terse:
        return "%s%s" % (str(sz)[:4].rstrip("."), unit[:1])
    else:
        return "%s %s" % (str(sz)[:4].rstrip("."), unit)


def fmt_size(sz: Optional[int]) -> str:
    if sz is None:
        return "off"

    return humansize(sz, True)


def unhumanize(sz: Union[str, int]) -> Optional[int]:
    """Parse a byte count such as "128M", "1.5GiB", "4096" or "off"

    Plain numbers are bytes. "off" and -1 mean unbounded and give None.
    Raises ValueError on anything else.
    """
    if isinstance(sz, int) and not isinstance(sz, bool):
        if sz == -1:
            return None
        if sz < 0:
            raise ValueError("size cannot be negative: %d" % (sz,))
        return sz

    zs = str(sz).strip()
    if zs.lower() == "off" or zs == "-1":
        return None

    m = RE_SIZE.match(zs.lower())
    if not m:
        raise ValueError("bad size %r" % (sz,))

    num, unit, tail = m.groups()
    if tail and not unit and tail != "b":
        raise ValueError("bad size %r" % (sz,))

    mul = UNHUMANIZE_UNITS.get(unit, 1)
    return int(float(num) * mul)


def parse_duration(txt: Union[str, int, float]) -> float:
    """Parse a duration such as "5m0s", "1h30m", "100ms" or "30" into seconds

    A bare number is seconds; "off" gives DURATION_OFF.
    Raises ValueError if the duration is malformed, negative or not finite.
    """
    if isinstance(txt, (int, float)) and not isinstance(txt, bool):
        if not math.isfinite(txt):
            raise ValueError("duration must be finite: %s" % (txt,))
        if txt < 0:
            raise ValueError("duration cannot be negative: %s" % (txt,))
        return float(txt)

    zs = str(txt).strip()
    if zs.lower() == "off":
        return DURATION_OFF

    if zs.startswith("-"):
        raise ValueError("duration cannot be negative: %r" % (txt,))

    try:
        num: Optional[float] = float(zs)
    except ValueError:
        num = None

    if num is not None:
        if not math.isfinite(num):
            raise ValueError("duration must be finite: %r" % (txt,))
        return num

    ret = 0.0
    ofs = 0
    for m in RE_DUR_PART.finditer(zs):
        if m.start() != ofs:
            break
        ret += float(m.group(1)) * DURATION_UNITS[m.group(2)]
        ofs = m.end()

    if not zs or ofs != len(zs):
        raise ValueError("bad duration %r" % (txt,))

    return ret


def fmt_duration(sec: float) -> str:
    if sec >= DURATION_OFF:
        return "off"

    if not sec:
        return "0s"

    if sec < 1:
        return "%gms" % (round(sec * 1000, 3),)

    ret = ""
    h, rem = divmod(sec, 3600)
    m, s = divmod(rem, 60)
    if h:
        ret += "%dh" % (h,)
    if h or m:
        ret += "%dm" % (m,)

    return ret + "%gs" % (round(s, 3),)
