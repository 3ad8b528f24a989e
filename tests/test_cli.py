"""Tests for the phpserial command-line tool."""

from __future__ import annotations

import contextlib
import io
import json
import os
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from phpserial import __version__
from phpserial._cli import main


class CliTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def write_input(self, data: bytes) -> str:
        path = os.path.join(self._tmp.name, "input")
        with open(path, "wb") as f:
            f.write(data)
        return path

    def run_cli(self, *argv):
        """Run main(); returns (exit code, stdout, stderr)."""
        out, err = io.StringIO(), io.StringIO()
        code = 0
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                main(list(argv))
            except SystemExit as e:
                code = e.code
        return code, out.getvalue(), err.getvalue()


class TestEncode(CliTestCase):
    def test_object(self):
        path = self.write_input(b'{"a": [1, 2.5]}')
        code, out, _ = self.run_cli("encode", "--input", path)
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), 'O:8:"stdClass":1:{s:1:"a";a:2:{i:0;i:1;i:1;d:2.5;}}')

    def test_assoc(self):
        path = self.write_input(b'{"a": null}')
        _, out, _ = self.run_cli("encode", "--assoc", "--input", path)
        self.assertEqual(out.strip(), 'a:1:{s:1:"a";N;}')

    def test_bad_json(self):
        path = self.write_input(b"{nope")
        code, _, err = self.run_cli("encode", "--input", path)
        self.assertEqual(code, 2)
        self.assertIn("JSON parse error", err)


class TestDecode(CliTestCase):
    def test_array(self):
        path = self.write_input(b'a:2:{i:0;s:2:"\xc3\xa9";i:1;b:1;}\n')
        code, out, _ = self.run_cli("decode", "--input", path)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), ["é", True])

    def test_error(self):
        path = self.write_input(b's:5:"ab";')
        code, _, err = self.run_cli("decode", "--input", path)
        self.assertEqual(code, 2)
        self.assertIn("[ERR_PARSE]", err)
        self.assertIn("Error at offset 9 of 9 bytes", err)


class TestCheck(CliTestCase):
    def test_valid(self):
        path = self.write_input(b"N;\n")
        self.assertEqual(self.run_cli("check", "--input", path)[0], 0)

    def test_trailing_data(self):
        path = self.write_input(b"N;N;")
        self.assertEqual(self.run_cli("check", "--input", path)[0], 1)


class TestMisc(CliTestCase):
    def test_version(self):
        code, out, _ = self.run_cli("version")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "phpserial {}".format(__version__))

    def test_no_command(self):
        code, _, _ = self.run_cli()
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
