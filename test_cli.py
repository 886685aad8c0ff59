# test_cli.py
import io
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import cli
import GitWise
from config import GlobalConfig


class TestParser(unittest.TestCase):
    def setUp(self):
        self.parser = cli.setup_parser(GlobalConfig())

    def test_analyze_defaults(self):
        args = self.parser.parse_args(["analyze"])
        self.assertEqual(args.days, 30)
        self.assertEqual(args.path, ".")
        self.assertFalse(args.compact)
        self.assertFalse(args.interactive)
        self.assertIsNone(args.html)

    def test_release_notes_options(self):
        args = self.parser.parse_args(
            ["-d", "release-notes", "--from", "v1.0", "--to", "v1.1", "--count", "3", "--llm", "mock"]
        )
        self.assertTrue(args.debug)
        self.assertEqual((args.from_ref, args.to_ref, args.count), ("v1.0", "v1.1", 3))
        self.assertEqual(args.llm, "mock")

    def test_pr_description_default_base(self):
        self.assertEqual(self.parser.parse_args(["pr-description"]).base, "main")

    def test_command_required(self):
        with self.assertRaises(SystemExit), redirect_stdout(io.StringIO()), mock.patch("sys.stderr", io.StringIO()):
            self.parser.parse_args([])

    def test_non_positive_counts_rejected(self):
        for argv in (
            ["release-notes", "--count", "0"],
            ["release-notes", "--count", "-3"],
            ["analyze", "--days", "0"],
        ):
            with self.subTest(argv=argv), self.assertRaises(SystemExit), mock.patch(
                "sys.stderr", io.StringIO()
            ):
                self.parser.parse_args(argv)

    def test_remote_path_kept_verbatim(self):
        args = self.parser.parse_args(["analyze", "--path", "https://github.com/octo/gitwise"])
        context = cli.build_context(args, GlobalConfig())
        self.assertEqual(context.repo_path, "https://github.com/octo/gitwise")
        self.assertTrue(context.is_remote)


@unittest.skipIf(shutil.which("git") is None, "git is not installed")
class TestRunCli(unittest.TestCase):
    def test_not_a_repository_exits_1(self):
        with tempfile.TemporaryDirectory() as tmp, redirect_stdout(io.StringIO()):
            code = cli.run_cli(["analyze", "--path", tmp, "--llm", "mock"])
        self.assertEqual(code, 1)


class TestEntryPoint(unittest.TestCase):
    def test_unhandled_error_exits_1(self):
        with mock.patch("cli.run_cli", side_effect=RuntimeError("git log timed out")), mock.patch(
            "GitWise.logger"
        ):
            with self.assertRaises(SystemExit) as raised:
                GitWise.main()
        self.assertEqual(raised.exception.code, 1)

    def test_exit_code_is_forwarded(self):
        with mock.patch("cli.run_cli", return_value=0):
            with self.assertRaises(SystemExit) as raised:
                GitWise.main()
        self.assertEqual(raised.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
