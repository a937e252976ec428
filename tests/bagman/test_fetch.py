# encoding: utf-8

import os, pdb, tempfile, shutil
import unittest as test

import requests
import fs.osfs

import bagman.fetch as fetch
from bagman.access.bag import Bag
from bagman.access.exceptions import FetchError
from bagman.formats.fetchlist import FetchEntry
from bagman.validate import ValidationIssue

class StubResponse(object):

    def __init__(self, url, content, status=200, failafter=None):
        self.url = url
        self.content = content
        self.status_code = status
        self.failafter = failafter

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError("{0} error for {1}"
                                     .format(self.status_code, self.url))

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size or 1):
            if self.failafter is not None and i >= self.failafter:
                raise requests.ConnectionError("connection reset")
            yield self.content[i:i+chunk_size]

class StubSession(object):
    """
    a stand-in for a requests.Session that serves canned responses
    """

    def __init__(self, files):
        self.files = files
        self.requested = []

    def get(self, url, stream=False, timeout=None):
        self.requested.append(url)
        if url not in self.files:
            return StubResponse(url, b"", 404)
        content = self.files[url]
        if isinstance(content, Exception):
            raise content
        if isinstance(content, tuple):
            return StubResponse(url, content[0], failafter=content[1])
        return StubResponse(url, content)

base = "http://example.com/"

class TestFetcher(test.TestCase):

    def setUp(self):
        self.tempdir = tempfile.mkdtemp(prefix="bagman-test_")
        self.fs = fs.osfs.OSFS(self.tempdir)
        self.fs.makedir("data")
        self.session = StubSession({
            base+"a.txt": b"hello",
            base+"b.txt": b"goodbye",
            base+"big.dat": b"x" * (3 * fetch.CHUNK_SIZE + 5),
            base+"broken.dat": (b"y" * (2 * fetch.CHUNK_SIZE), fetch.CHUNK_SIZE),
            base+"down.txt": requests.ConnectionError("no route to host")
        })
        self.fetcher = fetch.Fetcher(self.fs, self.session)

    def tearDown(self):
        self.fs.close()
        shutil.rmtree(self.tempdir)

    def test_ctor(self):
        self.assertIs(self.fetcher.fs, self.fs)
        self.assertIs(self.fetcher.session, self.session)
        self.assertIs(fetch.Fetcher(self.fs).session, requests)

    def test_download(self):
        self.fetcher.download(base+"a.txt", "data/sub/a.txt")
        self.assertEqual(self.fs.readbytes("data/sub/a.txt"), b"hello")

        self.fetcher.download(base+"big.dat", "data/big.dat")
        self.assertEqual(self.fs.getsize("data/big.dat"),
                         3 * fetch.CHUNK_SIZE + 5)

    def test_download_fail(self):
        with self.assertRaises(FetchError) as ctx:
            self.fetcher.download(base+"missing.txt", "data/missing.txt")
        self.assertEqual(ctx.exception.url, base+"missing.txt")
        self.assertIsInstance(ctx.exception.cause, requests.HTTPError)
        self.assertFalse(self.fs.exists("data/missing.txt"))

        with self.assertRaises(FetchError):
            self.fetcher.download(base+"down.txt", "data/down.txt")

    def test_download_partial(self):
        with self.assertRaises(FetchError):
            self.fetcher.download(base+"broken.dat", "data/broken.dat")
        self.assertFalse(self.fs.exists("data/broken.dat"))

    def test_fetch(self):
        entries = [FetchEntry(base+"a.txt", "5", "data/a.txt"),
                   FetchEntry(base+"missing.txt", "-", "data/missing.txt"),
                   FetchEntry(base+"b.txt", "-", "data/sub/b.txt")]
        issues = self.fetcher.fetch(entries)

        self.assertEqual(issues,
             [ValidationIssue("fetch", "URL {0} could not be downloaded."
                                       .format(base+"missing.txt"))])
        self.assertEqual(self.fs.readbytes("data/a.txt"), b"hello")
        self.assertEqual(self.fs.readbytes("data/sub/b.txt"), b"goodbye")
        self.assertFalse(self.fs.exists("data/missing.txt"))

    def test_skip_existing(self):
        self.fs.writebytes("data/a.txt", b"local")
        issues = self.fetcher.fetch([FetchEntry(base+"a.txt", "5", "data/a.txt")])
        self.assertEqual(issues, [])
        self.assertEqual(self.session.requested, [])
        self.assertEqual(self.fs.readbytes("data/a.txt"), b"local")

    def test_unsafe(self):
        issues = self.fetcher.fetch([
            FetchEntry(base+"a.txt", "5", "../outside.txt"),
            FetchEntry(base+"a.txt", "5", "/tmp/outside.txt"),
            FetchEntry(base+"b.txt", "-", "data/b.txt")])
        self.assertEqual(len(issues), 2)
        self.assertEqual(issues[0].subject, "fetch")
        self.assertIn("../outside.txt", issues[0].message)
        self.assertEqual(self.session.requested, [base+"b.txt"])
        self.assertTrue(self.fs.exists("data/b.txt"))

class TestBagFetch(test.TestCase):

    def setUp(self):
        self.tempdir = tempfile.mkdtemp(prefix="bagman-test_")
        self.bagdir = os.path.join(self.tempdir, "samplebag")
        self.session = StubSession({ base+"a.txt": b"hello" })
        bag = Bag(self.bagdir)
        bag.add_fetch(base+"a.txt", "data/a.txt", 5)
        bag.add_fetch(base+"gone.txt", "data/gone.txt")
        bag.close()

    def tearDown(self):
        shutil.rmtree(self.tempdir)

    def test_fetch(self):
        with Bag(self.bagdir, session=self.session) as bag:
            bag.fetch()
            self.assertEqual(len(bag.errors), 1)
            self.assertEqual(bag.errors[0].subject, "fetch")
            self.assertIn("gone.txt", bag.errors[0].message)
            self.assertTrue(os.path.isfile(os.path.join(bag.data_directory,
                                                        "a.txt")))

    def test_fetch_on_open(self):
        with Bag(self.bagdir, fetch=True, session=self.session) as bag:
            self.assertEqual(len(bag.errors), 1)
            self.assertEqual(self.session.requested,
                             [base+"a.txt", base+"gone.txt"])

    def test_fetch_validate(self):
        with Bag(self.bagdir) as bag:
            bag.fetch(validate=True, session=self.session)
            self.assertEqual(bag.errors, [])
            self.assertEqual(bag.manifest["data/a.txt"],
                             "aaf4c61ddcc5e8a2dabede0f3b482cd9aea9434d")

    def test_fetch_bag(self):
        bag = fetch.fetch_bag(self.bagdir, session=self.session)
        try:
            self.assertIsInstance(bag, Bag)
            self.assertEqual(len(bag.errors), 1)
            self.assertTrue(os.path.isfile(os.path.join(bag.data_directory,
                                                        "a.txt")))
        finally:
            bag.close()


if __name__ == '__main__':
    test.main()
