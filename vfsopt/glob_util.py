"""Glob to regex translation for path exclusion rules.

Globs match slash-separated paths relative to the root of the overlay:

  *       any run of characters except "/"
  **      any run of characters including "/"
  ?       any single character except "/"
  [...]   a character class, passed through to the regex
  {a,b}   alternation
  \\x      the literal character x

A glob starting with "/" only matches from the root; any other glob may
match from the start of any path component.
"""

import re
from typing import Pattern

# passed through as literals
RE_SPECIAL = set(".+()|^$")


class GlobError(ValueError):
    """A glob which cannot be turned into a regex."""

    def __init__(self, glob: str, reason: str) -> None:
        super(GlobError, self).__init__("%s in glob %r" % (reason, glob))
        self.glob = glob
        self.reason = reason


def glob_to_regex_str(glob: str, ignore_case: bool = False) -> str:
    ret = []
    if ignore_case:
        ret.append("(?i)")

    if glob.startswith("/"):
        src = glob[1:]
        ret.append("^")
    else:
        src = glob
        ret.append("(^|/)")

    nstars = 0
    in_braces = False
    in_brackets = 0
    escaped = False

    def flush_stars() -> None:
        if nstars == 1:
            ret.append("[^/]*")
        elif nstars == 2:
            ret.append(".*")
        elif nstars > 2:
            raise GlobError(glob, "too many stars")

    for c in src:
        if escaped:
            ret.append(re.escape(c))
            escaped = False
            continue

        if c != "*":
            flush_stars()
            nstars = 0

        if in_brackets:
            ret.append(c)
            if c == "[":
                in_brackets += 1
            elif c == "]":
                in_brackets -= 1
            continue

        if c == "\\":
            escaped = True
        elif c == "*":
            nstars += 1
        elif c == "?":
            ret.append("[^/]")
        elif c == "[":
            ret.append(c)
            in_brackets += 1
        elif c == "]":
            raise GlobError(glob, "mismatched ']'")
        elif c == "{":
            if in_braces:
                raise GlobError(glob, "can't nest '{' '}'")
            in_braces = True
            ret.append("(")
        elif c == "}":
            if not in_braces:
                raise GlobError(glob, "mismatched '{' and '}'")
            in_braces = False
            ret.append(")")
        elif c == ",":
            ret.append("|" if in_braces else c)
        elif c in RE_SPECIAL:
            ret.append("\\" + c)
        else:
            ret.append(c)

    flush_stars()

    if escaped:
        raise GlobError(glob, "trailing '\\'")

    if in_brackets:
        raise GlobError(glob, "mismatched '[' and ']'")

    if in_braces:
        raise GlobError(glob, "mismatched '{' and '}'")

    ret.append("$")
    return "".join(ret)


def glob_to_regex(glob: str, ignore_case: bool = False) -> Pattern[str]:
    """Compile a glob into a regex which is tested with .search()

    Raises GlobError if the glob is malformed.
    """
    ptn = glob_to_regex_str(glob, ignore_case)
    try:
        return re.compile(ptn)
    except re.error as ex:
        raise GlobError(glob, "bad glob pattern (regex %r: %s)" % (ptn, ex))
