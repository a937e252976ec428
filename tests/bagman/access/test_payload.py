# encoding: utf-8

import os, pdb, tempfile, shutil
import unittest as test

import fs.osfs

from bagman.access.payload import payload_files, is_dangerous

class TestPayloadFiles(test.TestCase):

    def setUp(self):
        self.tempdir = tempfile.mkdtemp(prefix="bagman-test_")
        self.fs = fs.osfs.OSFS(self.tempdir)

    def tearDown(self):
        self.fs.close()
        shutil.rmtree(self.tempdir)

    def test_no_data(self):
        self.assertEqual(list(payload_files(self.fs)), [])

    def test_list(self):
        self.fs.makedirs("data/sub/deeper")
        self.fs.makedirs("data/.hidden")
        self.fs.writetext("data/b.txt", "b")
        self.fs.writetext("data/a.txt", "a")
        self.fs.writetext("data/.secret", "s")
        self.fs.writetext("data/sub/c.txt", "c")
        self.fs.writetext("data/sub/deeper/d.txt", "d")
        self.fs.writetext("data/.hidden/e.txt", "e")
        self.fs.writetext("bagit.txt", "x")

        self.assertEqual(list(payload_files(self.fs)),
                         ["data/a.txt", "data/b.txt", "data/sub/c.txt",
                          "data/sub/deeper/d.txt"])

    def test_other_datadir(self):
        self.fs.makedirs("payload")
        self.fs.writetext("payload/a.txt", "a")
        self.assertEqual(list(payload_files(self.fs, "payload")),
                         ["payload/a.txt"])

class TestIsDangerous(test.TestCase):

    def test_safe(self):
        self.assertFalse(is_dangerous("data/file.txt"))
        self.assertFalse(is_dangerous("data/sub/../file.txt"))
        self.assertFalse(is_dangerous("./data/file.txt"))

    def test_unsafe(self):
        self.assertTrue(is_dangerous(""))
        self.assertTrue(is_dangerous("/etc/passwd"))
        self.assertTrue(is_dangerous("~/.bashrc"))
        self.assertTrue(is_dangerous("../outside.txt"))
        self.assertTrue(is_dangerous("data/../../outside.txt"))
        self.assertTrue(is_dangerous("C:/Windows/evil.dll"))
        self.assertTrue(is_dangerous("data\\..\\..\\evil"))


if __name__ == '__main__':
    test.main()
