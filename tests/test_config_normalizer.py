"""Unit tests for the option normalizer."""

import stat
import unittest
from unittest.mock import MagicMock
from vfsopt.config.normalizer import OptionNormalizer
from vfsopt.glob_util import glob_to_regex_str
from vfsopt.options import default_options, normalize


class TestOptionNormalizer(unittest.TestCase):
    """Test OptionNormalizer class."""

    def setUp(self) -> None:
        """Set up test fixtures."""
        self.log_func = MagicMock()
        self.normalizer = OptionNormalizer(self.log_func)
        self.opt = default_options("linux")

    def test_normalizer_instantiation(self) -> None:
        """Test that normalizer can be instantiated."""
        self.assertIsNotNone(self.normalizer)
        self.assertEqual(self.normalizer.log, self.log_func)

    def test_umask_022(self) -> None:
        """Test the common umask against the default permissions."""
        self.opt.umask = 0o022

        self.normalizer.normalize(self.opt)

        self.assertEqual(self.opt.dir_perms, 0o755 | stat.S_IFDIR)
        self.assertEqual(stat.S_IMODE(self.opt.dir_perms), 0o755)
        self.assertTrue(stat.S_ISDIR(self.opt.dir_perms))
        self.assertEqual(self.opt.file_perms, 0o644)
        self.log_func.assert_not_called()

    def test_umask_clears_everything(self) -> None:
        """Test that the directory bit survives a umask of 777."""
        self.opt.umask = 0o777

        self.normalizer.normalize(self.opt)

        self.assertEqual(self.opt.dir_perms, stat.S_IFDIR)
        self.assertEqual(self.opt.file_perms, 0)

    def test_directory_bit_always_set(self) -> None:
        """Test the directory bit for many umask/permission combinations."""
        for umask in (0, 0o002, 0o022, 0o077, 0o777, 0o7777):
            for perms in (0, 0o500, 0o755, 0o777, 0o1777):
                opt = default_options("linux")
                opt.umask = umask
                opt.dir_perms = perms
                opt.file_perms = perms

                self.normalizer.normalize(opt)

                self.assertEqual(opt.dir_perms & stat.S_IFDIR, stat.S_IFDIR)
                self.assertEqual(opt.file_perms & umask, 0)
                self.assertEqual(opt.file_perms, perms & ~umask)

    def test_sizes_untouched(self) -> None:
        """Test that unbounded sizes stay unbounded."""
        self.normalizer.normalize(self.opt)

        self.assertIsNone(self.opt.chunk_size_limit)
        self.assertIsNone(self.opt.cache_max_size)
        self.assertIsNone(self.opt.cache_min_free_space)
        self.assertIsNone(self.opt.disk_space_total_size)
        self.assertEqual(self.opt.chunk_size, 128 * 1024 * 1024)

    def test_compile_exclusions_keeps_order(self) -> None:
        """Test that well-formed globs all compile, in order."""
        globs = ["*.tmp", "/top/**", "{a,b}.part", "x?y"]
        self.opt.upload_exclude = list(globs)

        nbad = self.normalizer.compile_exclusions(self.opt)

        self.assertEqual(nbad, 0)
        self.assertEqual(
            [x.pattern for x in self.opt.exclude_patterns],
            [glob_to_regex_str(x) for x in globs],
        )
        self.log_func.assert_not_called()

    def test_compile_exclusions_skips_bad_glob(self) -> None:
        """Test that one bad glob is logged once and skipped."""
        self.opt.upload_exclude = ["*.tmp", "[", "cache/**"]

        self.normalizer.normalize(self.opt)

        self.assertEqual(len(self.opt.exclude_patterns), 2)
        self.assertEqual(
            [x.pattern for x in self.opt.exclude_patterns],
            [glob_to_regex_str("*.tmp"), glob_to_regex_str("cache/**")],
        )
        self.log_func.assert_called_once()
        msg, level = self.log_func.call_args[0]
        self.assertTrue(msg.startswith("[: "))
        self.assertIn("mismatched '['", msg)
        self.assertEqual(level, 3)

    def test_escaped_glob_is_kept(self) -> None:
        """Test that a glob with an escaped letter compiles and is not logged."""
        self.opt.upload_exclude = [r"\q.tmp", "*.log"]

        self.normalizer.normalize(self.opt)

        self.assertEqual(len(self.opt.exclude_patterns), 2)
        self.assertTrue(self.opt.upload_excluded("q.tmp"))
        self.log_func.assert_not_called()

    def test_exclusions_are_case_sensitive(self) -> None:
        """Test that compiled patterns respect case."""
        self.opt.upload_exclude = ["*.TMP"]

        self.normalizer.normalize(self.opt)

        self.assertFalse(self.opt.upload_excluded("a.tmp"))
        self.assertTrue(self.opt.upload_excluded("a.TMP"))

    def test_second_normalize_is_refused(self) -> None:
        """Test that normalizing twice changes nothing."""
        self.opt.umask = 0o022
        self.opt.upload_exclude = ["*.tmp"]
        self.normalizer.normalize(self.opt)
        self.log_func.reset_mock()

        ret = self.normalizer.normalize(self.opt)

        self.assertIs(ret, self.opt)
        self.assertEqual(len(self.opt.exclude_patterns), 1)
        self.assertEqual(self.opt.dir_perms, 0o755 | stat.S_IFDIR)
        self.log_func.assert_called_once()
        self.assertEqual(self.log_func.call_args[0][1], 3)


class TestNormalizeFunction(unittest.TestCase):
    """Test the module-level normalize()."""

    def test_returns_same_object(self) -> None:
        """Test in-place normalization."""
        opt = default_options("linux")
        self.assertIs(normalize(opt, MagicMock()), opt)
        self.assertTrue(opt.is_normalized)

    def test_default_logger(self) -> None:
        """Test that bad globs reach the logging module without a log_func."""
        opt = default_options("linux")
        opt.upload_exclude = ["ok/*", "{oops"]

        with self.assertLogs("vfsopt", level="WARNING") as cm:
            normalize(opt)

        self.assertEqual(len(cm.output), 1)
        self.assertIn("{oops", cm.output[0])
        self.assertEqual(len(opt.exclude_patterns), 1)


if __name__ == "__main__":
    unittest.main()
