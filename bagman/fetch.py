"""
functions for resolving the remote files listed in a bag's fetch.txt file
into local payload files.
"""
import logging

import requests
import fs.path
from fs.errors import FSError

from .constants import DEFAULT_FETCH_TIMEOUT
from .access.exceptions import FetchError
from .access.payload import is_dangerous
from .validate.base import ValidationIssue

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
FETCH_LABEL = "fetch"

class Fetcher(object):
    """
    A class for downloading the files listed in a bag's fetch.txt file into
    the bag.

    Entries are processed in order, one at a time.  An entry whose
    destination file already exists is skipped.  A failure to retrieve one
    entry is recorded as a ValidationIssue (labeled "fetch") and does not
    prevent the remaining entries from being fetched.
    """

    def __init__(self, filesys, session=None, timeout=DEFAULT_FETCH_TIMEOUT):
        """
        create the fetcher.
        :param FS filesys:   the filesystem rooted at the bag's root directory
        :param session:      the object used to issue HTTP GET requests; it
                             must provide a get() method compatible with
                             requests.get().  If not provided, the requests
                             module itself is used.
                             :type session: requests.Session
        :param timeout:      the timeout to pass to get(); see the requests
                             documentation.
        """
        self.fs = filesys
        self.session = session or requests
        self.timeout = timeout

    def download(self, url, path):
        """
        stream the contents of the given URL into the file at the given path.
        If the download fails, any partially written file is removed.

        :param str url:   the URL of the remote file
        :param str path:  the destination path relative to the bag's root
        :raises FetchError:  if the file could not be retrieved and saved
        """
        parent = fs.path.dirname(path)
        try:
            if parent:
                self.fs.makedirs(parent, recreate=True)
            with self.session.get(url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                with self.fs.openbin(path, 'w') as fd:
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            fd.write(chunk)
        except (requests.RequestException, OSError, FSError) as ex:
            if self.fs.isfile(path):
                self.fs.remove(path)
            raise FetchError(url, cause=ex)

    def fetch(self, entries):
        """
        download the files for the given fetch entries that are not already
        present in the bag.

        :param entries:  the entries from the bag's fetch.txt
        :type entries:   list of FetchEntry
        :return:  the issues encountered; an empty list means all missing
                  files were retrieved.
        :rtype: list of ValidationIssue
        """
        issues = []
        for entry in entries:
            if is_dangerous(entry.filename):
                msg = "Path {0} in fetch.txt is unsafe.".format(entry.filename)
                LOGGER.warning(msg)
                issues.append(ValidationIssue(FETCH_LABEL, msg))
                continue

            if self.fs.exists(entry.filename):
                LOGGER.debug("Skipping fetch of existing file: %s",
                             entry.filename)
                continue

            LOGGER.info("Fetching %s to %s", entry.url, entry.filename)
            try:
                self.download(entry.url, entry.filename)
            except FetchError as ex:
                LOGGER.warning("%s (%s)", str(ex), str(ex.cause))
                issues.append(ValidationIssue(FETCH_LABEL, str(ex)))

        return issues

def fetch_bag(bag, validate=False, session=None):
    """
    download the missing remote files of the given bag.

    :param bag:           the bag, either as a Bag instance or the path to
                          its root directory (or serialized file)
    :type bag:            Bag or str
    :param bool validate: if True, update and then validate the bag after
                          fetching
    :param session:       the requests-compatible session to download with
    :return:  the Bag instance; its errors attribute lists any failures.
    """
    from .access.bag import Bag
    if not isinstance(bag, Bag):
        bag = Bag(bag)
    bag.fetch(validate, session=session)
    return bag
