"""
support for reading and writing a bag's fetch.txt file
"""
import logging
from collections import namedtuple

from ..constants import UNKNOWN_LENGTH

LOGGER = logging.getLogger(__name__)

class FetchEntry(namedtuple("FetchEntry", "url length filename")):
    """
    a remote file listed in fetch.txt:  the URL to retrieve it from, its
    expected length in bytes (or "-" if unknown), and the path, relative to
    the bag's root directory, where it should be saved.
    """
    __slots__ = ()

    def format(self):
        """
        format this entry into a line for fetch.txt, including the trailing
        newline character.  This is the reverse of parse_line().
        """
        return " ".join([self.url, str(self.length), self.filename]) + "\n"

    @classmethod
    def parse_line(cls, line):
        """
        parse a line from fetch.txt, returning a FetchEntry or None if the
        line does not contain exactly three fields.
        """
        fields = line.split()
        if len(fields) != 3:
            return None
        return cls(*fields)

    @property
    def length_known(self):
        return self.length != UNKNOWN_LENGTH

def parse_fetch_list(lines):
    """
    parse the lines of a fetch.txt file into a list of FetchEntry instances,
    in the order given.  Lines that do not have exactly three fields are
    dropped.
    """
    out = []
    for line in lines:
        entry = FetchEntry.parse_line(line)
        if entry is None:
            LOGGER.debug("Skipping malformed fetch line: %s", line.strip())
            continue
        out.append(entry)
    return out

def format_fetch_list(entries):
    """
    format a list of FetchEntry instances into the lines of a fetch.txt file,
    preserving their order.
    """
    return [FetchEntry(*e).format() for e in entries]
