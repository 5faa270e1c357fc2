import logging
import re
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from typing import Protocol

    class NamedLogger(Protocol):
        def __call__(self, msg: str, c: Union[int, str] = 0) -> None:
            return None


RE_ANSI = re.compile("\033\\[[^mK]*[mK]")


def c2level(c: Union[int, str]) -> int:
    """map a log color (1=err, 3=warn, 6=chatty) to a logging level"""
    if c == 1:
        return logging.ERROR
    if c == 3:
        return logging.WARNING
    if c == 6:
        return logging.DEBUG
    return logging.INFO


class LogBridge(object):
    """A NamedLogger which forwards to the logging module"""

    def __init__(self, name: str) -> None:
        self.name = name
        self.logger = logging.getLogger(name)

    def __repr__(self) -> str:
        return "<%s %s>" % (self.__class__.__name__, self.name)

    def __call__(self, msg: str, c: Union[int, str] = 0) -> None:
        self.logger.log(c2level(c), RE_ANSI.sub("", msg))


def make_logger(name: str = "vfsopt") -> "NamedLogger":
    return LogBridge(name)
