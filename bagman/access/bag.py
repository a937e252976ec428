"""
This module provides the Bag class, the main interface for creating, opening,
updating, validating, fetching, and packaging bags.
"""
import os, shutil, codecs, tempfile, logging
from collections import OrderedDict
from functools import partial

import fs.osfs

from ..constants import (DEFAULT_VERSION, DEFAULT_ENCODING, DEFAULT_ALGORITHM,
                         ALGORITHMS, HASH_LENGTHS, DATA_DIR, BAGIT_FILE,
                         BAG_INFO_FILE, FETCH_FILE, UNKNOWN_LENGTH, TGZ,
                         Version, manifest_name, tagmanifest_name,
                         parse_bagit_declaration, format_bagit_declaration)
from ..formats import load_tag_file, write_tag_file
from ..formats.manifest import parse_manifest
from ..formats.tags import TagFields
from ..formats.fetchlist import FetchEntry, parse_fetch_list, format_fetch_list
from ..validate.base import ValidationIssue
from ..validate.bag import BagValidator
from ..update import Updater
from ..fetch import Fetcher
from ..package import package_bag, extract_bag, archive_method
from .checksum import ChecksumEngine, check_algorithm
from .payload import payload_files
from .exceptions import BagFormatError

LOGGER = logging.getLogger(__name__)

def _parse_bagit_lines(lines):
    return parse_bagit_declaration("\n".join(lines))

class Bag(object):
    """
    A representation of a bag on local disk.

    Instantiating a Bag with a path that does not exist creates a new, empty
    bag there.  A path to an existing directory opens the bag in it; a path
    to a .zip, .tar.gz, or .tgz file is first unpacked into a temporary
    directory, and the unpacked bag is opened.

    Problems found while opening an existing bag (e.g. an unreadable
    bagit.txt) do not prevent construction; they are recorded in the
    errors list.  Callers should check is_valid() (after validate()) or
    the errors list rather than rely on exceptions.

    The Bag instance is the sole owner of the bag's in-memory state (its
    manifests, fetch list, bag-info fields, and errors); the operations
    that compute new state return it to the Bag, which then stores it.
    """

    def __init__(self, bag, validate=False, extended=True, fetch=False,
                 session=None):
        """
        create or open a bag.

        :param str bag:        the path to the bag's root directory or to a
                               serialized bag file
        :param bool validate:  if True, validate the bag after opening it
        :param bool extended:  if True, the optional tag files (tag manifest,
                               fetch.txt, bag-info.txt) are maintained; a new
                               bag will be created with these files.
        :param bool fetch:     if True, download the files listed in
                               fetch.txt after opening the bag
        :param session:        a requests-compatible session to use when
                               fetching remote files
        """
        if not bag:
            raise ValueError("Bag: path to bag not provided")
        self._location = os.fspath(bag)
        self._extended = bool(extended)
        self._session = session

        self._alg = DEFAULT_ALGORITHM
        self._version = Version(DEFAULT_VERSION)
        self._encoding = DEFAULT_ENCODING
        self._compression = None
        self._tmpdir = None

        self._manifest = OrderedDict()
        self._tagmanifest = OrderedDict()
        self._fetch = []
        self._info = TagFields()
        self._errors = []

        if os.path.exists(self._location):
            self._open()
        else:
            self._create()

        if fetch:
            self.fetch()
        if validate:
            self.validate()

    def __str__(self):
        return self._root

    def __repr__(self):
        return "Bag('{0}')".format(self._root)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    # --- opening and creating

    def _open(self):
        if os.path.isdir(self._location):
            self._root = os.path.abspath(self._location)
        else:
            self._compression = archive_method(self._location)
            if not self._compression:
                raise BagFormatError("Invalid compressed bag name: " +
                                     self._location, self._location)
            self._tmpdir = tempfile.mkdtemp(prefix="bagit_")
            try:
                self._root = extract_bag(self._location, self._tmpdir)
                if not os.path.isdir(self._root):
                    raise BagFormatError("File does not appear to contain a "+
                                         "serialized bag: " + self._location,
                                         self._location)
            except Exception:
                shutil.rmtree(self._tmpdir, ignore_errors=True)
                self._tmpdir = None
                raise

        self._fs = fs.osfs.OSFS(self._root)
        self._read_bagit()
        self._read_manifests()
        self._read_fetch()
        self._read_info()
        LOGGER.info("Opened bag %s (%s)", self._root, self._alg)

    def _record(self, subject, message):
        LOGGER.warning("%s: %s: %s", self._root, subject, message)
        self._errors.append(ValidationIssue(subject, message))

    def _read_bagit(self):
        res = load_tag_file(self._fs, BAGIT_FILE, self._encoding,
                            _parse_bagit_lines)
        if res.malformed:
            self._record("bagit", "Error reading the bagit.txt file.")
        if not res.loaded:
            return

        self._version, encoding = res.value
        if encoding:
            try:
                codecs.lookup(encoding)
                self._encoding = encoding
            except LookupError:
                self._record("bagit",
                             "Unsupported tag file encoding: " + encoding)

    def _read_manifest(self, names):
        # load the first of the named manifests present, returning its
        # algorithm and contents
        for alg in ALGORITHMS:
            name = names(alg)
            res = load_tag_file(self._fs, name, self._encoding,
                                partial(parse_manifest,
                                        hash_length=HASH_LENGTHS[alg]))
            if res.absent:
                continue
            if res.malformed:
                self._record("manifest", "Error reading {0}.".format(name))
                return alg, OrderedDict()
            return alg, res.value
        return None, OrderedDict()

    def _read_manifests(self):
        alg, self._manifest = self._read_manifest(manifest_name)
        if alg:
            self._alg = alg
        self._tagmanifest = self._read_manifest(tagmanifest_name)[1]

    def _read_fetch(self):
        res = load_tag_file(self._fs, FETCH_FILE, self._encoding,
                            parse_fetch_list)
        if res.malformed:
            self._record("fetch", "Error reading fetch file.")
        elif res.loaded:
            self._fetch = res.value

    def _read_info(self):
        res = load_tag_file(self._fs, BAG_INFO_FILE, self._encoding,
                            TagFields.parse)
        if res.malformed:
            self._record("baginfo", "Error reading bag info file.")
        elif res.loaded:
            self._info = res.value

    def _create(self):
        self._root = os.path.abspath(self._location)
        os.mkdir(self._root)
        self._fs = fs.osfs.OSFS(self._root)
        self._fs.makedir(DATA_DIR)

        self._write(BAGIT_FILE, [format_bagit_declaration(self._version,
                                                          self._encoding)])
        self._write(self.manifest_name, [])
        if self._extended:
            self._write(self.tagmanifest_name, [])
            self._write(FETCH_FILE, [])
            self._write(BAG_INFO_FILE, [])
        LOGGER.info("Created bag %s", self._root)

    def _write(self, name, lines):
        write_tag_file(self._fs, name, lines, self._encoding)

    # --- properties

    @property
    def path(self):
        """
        the absolute path to the bag's root directory
        """
        return self._root

    @property
    def name(self):
        """
        the name of the root directory of the bag (without any parent path
        included).
        """
        return os.path.basename(self._root)

    @property
    def location(self):
        """
        the location the bag was opened from; for a serialized bag, this is
        the path to the archive file.
        """
        return self._location

    @property
    def compression(self):
        """
        the packaging method of the archive the bag was opened from ("zip"
        or "tgz"), or None if it was opened from a directory.
        """
        return self._compression

    @property
    def filesystem(self):
        """
        an FS instance rooted at the bag's root directory
        """
        return self._fs

    @property
    def data_directory(self):
        return os.path.join(self._root, DATA_DIR)

    @property
    def version(self):
        """
        the BagIt version declared by the bag, as a Version instance
        """
        return self._version

    @property
    def tag_file_encoding(self):
        return self._encoding

    @property
    def hash_encoding(self):
        """
        the checksum algorithm used for the bag's manifests, "sha1" or "md5"
        """
        return self._alg

    @hash_encoding.setter
    def hash_encoding(self, algorithm):
        self.set_hash_encoding(algorithm)

    @property
    def checksum_engine(self):
        return ChecksumEngine(self._alg)

    @property
    def manifest_name(self):
        """
        the name of the payload manifest file for the current algorithm
        """
        return manifest_name(self._alg)

    @property
    def tagmanifest_name(self):
        """
        the name of the tag manifest file for the current algorithm
        """
        return tagmanifest_name(self._alg)

    @property
    def manifest(self):
        """
        the payload manifest, a mapping of paths (relative to the bag's root
        directory) to checksums.  It is regenerated by update().
        """
        return self._manifest

    @property
    def tag_manifest(self):
        return self._tagmanifest

    @property
    def fetch_entries(self):
        """
        the entries of the fetch.txt file as a list of FetchEntry tuples
        """
        return list(self._fetch)

    @property
    def info(self):
        """
        the fields from the bag-info.txt file as a TagFields instance.  Use
        save_info() to write changes to disk.
        """
        return self._info

    @property
    def errors(self):
        """
        the list of ValidationIssue instances recorded by the last call to
        validate() and by any subsequent fetch operations
        """
        return self._errors

    # --- inspection

    def is_extended(self):
        return self._extended

    def is_valid(self):
        """
        return True if no errors have been recorded for this bag.  Call
        validate() first to check the bag's current state.
        """
        return len(self._errors) == 0

    def get_bag_info(self):
        """
        return a dictionary summarizing the bag's version, tag file encoding,
        and checksum algorithm.
        """
        return { "version":  "{0}.{1}".format(self._version.major,
                                              self._version.minor),
                 "encoding": self._encoding,
                 "hash":     self._alg }

    def get_data_directory(self):
        return self.data_directory

    def get_hash_encoding(self):
        return self._alg

    def set_hash_encoding(self, algorithm):
        """
        set the checksum algorithm to use for the bag's manifests.  The
        manifest files are not rewritten until update() is called.

        :param str algorithm:  "sha1" or "md5" (case-insensitive)
        :raises BagConfigurationError:  if the algorithm is not supported
        """
        self._alg = check_algorithm(algorithm)

    def get_bag_contents(self):
        """
        return the absolute paths of the (non-hidden) files in the bag's
        payload directory
        """
        return [os.path.join(self._root, *p.split('/'))
                for p in payload_files(self._fs)]

    def get_bag_errors(self, validate=False):
        """
        return the errors recorded for this bag, optionally validating it
        first.
        """
        if validate:
            self.validate()
        return self._errors

    def compare_manifest_with_fs(self):
        """
        compare the payload manifest with the payload files on disk.
        :return:  a 2-tuple of sorted lists: the paths listed in the manifest
                  but not found on disk, and the paths on disk not listed
                  in the manifest.
        """
        ondisk = set(payload_files(self._fs))
        listed = set(self._manifest.keys())
        return sorted(listed - ondisk), sorted(ondisk - listed)

    # --- operations

    def validate(self):
        """
        check the bag's payload against its manifest, replacing the recorded
        errors with the issues found.
        :return:  the list of issues; the bag is valid if it is empty
        :rtype: list of ValidationIssue
        """
        self._errors = BagValidator(self).validate()
        return self._errors

    def update(self):
        """
        bring the bag's manifests up to date with its payload: payload file
        names are sanitized, and the payload manifest and tag manifest are
        regenerated with the current algorithm (removing manifests for
        other algorithms).  Errors are raised immediately.
        """
        updater = Updater(self._fs, self._alg, self._encoding)
        self._manifest, self._tagmanifest = updater.update()

    def fetch(self, validate=False, session=None):
        """
        download the files listed in fetch.txt that are not yet present in
        the bag.  Failures are added to the errors list.

        :param bool validate:  if True, run update() and then validate()
                               after fetching
        :param session:        a requests-compatible session to use in place
                               of the one given at construction
        """
        fetcher = Fetcher(self._fs, session or self._session)
        self._errors.extend(fetcher.fetch(self._fetch))
        if validate:
            self.update()
            self.validate()

    def add_fetch(self, url, filename, length=UNKNOWN_LENGTH):
        """
        add a remote file to the bag's fetch.txt
        :param str url:       the URL of the remote file
        :param str filename:  the path, relative to the bag's root directory,
                              where the file belongs
        """
        self._fetch.append(FetchEntry(url, str(length), filename))
        self._write(FETCH_FILE, format_fetch_list(self._fetch))

    def clear_fetch(self):
        """
        remove all entries from the bag's fetch.txt
        """
        self._fetch = []
        self._write(FETCH_FILE, [])

    def save_info(self):
        """
        write the current bag-info fields (self.info) to bag-info.txt.  The
        tag manifest is not updated until update() is called.
        """
        self._write(BAG_INFO_FILE, self._info.format())

    def package(self, destination, method=TGZ):
        """
        serialize the bag into an archive file.

        :param str destination:  the path to the output file; ".zip" or ".tgz"
                                 is appended if it does not already end that
                                 way.
        :param str method:       the packaging method, "zip" or "tgz"
        :return:  the path to the archive that was written
        :raises BagConfigurationError:  if the method is not supported
        """
        return package_bag(self._root, destination, method)

    def close(self):
        """
        release the bag's resources.  For a bag unpacked from an archive,
        this removes the temporary directory it was unpacked into.
        """
        self._fs.close()
        if self._tmpdir:
            shutil.rmtree(self._tmpdir, ignore_errors=True)
            self._tmpdir = None
