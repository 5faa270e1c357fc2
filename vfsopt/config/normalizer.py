"""One-shot normalization of VFS options.

Applies the umask to the permission bits, makes sure directories are
presented as directories, and compiles the upload-exclude globs.
"""

import stat
from typing import TYPE_CHECKING, Callable

from ..glob_util import GlobError, glob_to_regex

if TYPE_CHECKING:
    from ..options import VfsOptions


class OptionNormalizer:
    """Normalize a populated VfsOptions before it is shared."""

    def __init__(self, log_func: Callable[[str, int], None]):
        """Initialize normalizer with logging function.

        Args:
            log_func: Function for logging messages (msg, level)
        """
        self.log = log_func

    def mask_permissions(self, opt: "VfsOptions") -> None:
        """Strip the bits set in the umask from dir_perms and file_perms."""
        opt.dir_perms &= ~opt.umask
        opt.file_perms &= ~opt.umask

    def mark_directory(self, opt: "VfsOptions") -> None:
        """Set the is-a-directory bit on dir_perms, whatever the umask did."""
        opt.dir_perms |= stat.S_IFDIR

    def compile_exclusions(self, opt: "VfsOptions") -> int:
        """Compile upload_exclude into exclude_patterns, keeping the order.

        Globs which fail to compile are logged and left out.

        Args:
            opt: Options with upload_exclude populated

        Returns:
            Number of globs which were skipped
        """
        nbad = 0
        for glob in opt.upload_exclude:
            try:
                ptn = glob_to_regex(glob, ignore_case=False)
            except GlobError as ex:
                nbad += 1
                msg = "%s: could not generate regex from glob for VFS cache exclusion: %s"
                self.log(msg % (glob, ex), 3)
                continue

            opt._exclude_patterns.append(ptn)

        return nbad

    def normalize(self, opt: "VfsOptions") -> "VfsOptions":
        """Run every normalization step, in order.

        Args:
            opt: Options to normalize in-place

        Returns:
            The same options object
        """
        if opt.is_normalized:
            self.log("vfs options were already normalized; leaving them as-is", 3)
            return opt

        # umask first, so the directory bit can never be masked away
        self.mask_permissions(opt)
        self.mark_directory(opt)
        self.compile_exclusions(opt)

        opt._normalized = True
        return opt
