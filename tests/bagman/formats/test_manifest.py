# encoding: utf-8

import os, pdb
import unittest as test
from collections import OrderedDict

import bagman.formats.manifest as mf

hello = "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d"
empty = "da39a3ee5e6b4b0d3255bfef95601890afd80709"

class TestParseManifest(test.TestCase):

    def test_parse(self):
        lines = [hello + " data/file.txt", empty + "  data/sub/empty.txt"]
        man = mf.parse_manifest(lines, 40)
        self.assertEqual(list(man.keys()),
                         ["data/file.txt", "data/sub/empty.txt"])
        self.assertEqual(man["data/file.txt"], hello)
        self.assertEqual(man["data/sub/empty.txt"], empty)

    def test_path_with_spaces(self):
        man = mf.parse_manifest([hello + " data/My File.txt "], 40)
        self.assertEqual(list(man.keys()), ["data/My File.txt"])

    def test_skip_no_path(self):
        man = mf.parse_manifest([hello, hello + "   ", "short"], 40)
        self.assertEqual(len(man), 0)

    def test_last_wins(self):
        man = mf.parse_manifest([hello + " data/a", empty + " data/a"], 40)
        self.assertEqual(len(man), 1)
        self.assertEqual(man["data/a"], empty)

    def test_md5(self):
        man = mf.parse_manifest(["5d41402abc4b2a76b9719d911017c592 data/a"], 32)
        self.assertEqual(man["data/a"], "5d41402abc4b2a76b9719d911017c592")

class TestFormatManifest(test.TestCase):

    def test_format(self):
        man = OrderedDict([("data/z.txt", empty), ("data/a.txt", hello)])
        self.assertEqual(mf.format_manifest(man),
                         [hello + " data/a.txt\n", empty + " data/z.txt\n"])

    def test_empty(self):
        self.assertEqual(mf.format_manifest({}), [])

    def test_reparse(self):
        man = {"data/b": hello, "data/a": empty}
        lines = [l.rstrip("\n") for l in mf.format_manifest(man)]
        self.assertEqual(dict(mf.parse_manifest(lines, 40)), man)


if __name__ == '__main__':
    test.main()
