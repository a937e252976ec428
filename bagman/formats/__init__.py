"""
A subpackage for reading and writing the line-oriented tag files of a bag.

The :py:mod:`manifest` module handles (tag) manifest files, the
:py:mod:`tags` module handles ``Key: value`` files such as bag-info.txt, and
the :py:mod:`fetchlist` module handles fetch.txt.  This module provides the
common machinery for loading any of them from a bag's filesystem.
"""
import re, logging
from collections import namedtuple

from fs.errors import FSError

from ..access.exceptions import BagFormatError

LOGGER = logging.getLogger(__name__)

LOADED = "loaded"
ABSENT = "absent"
MALFORMED = "malformed"

_linesepre = re.compile(r'[\n\r]+')

class LoadResult(namedtuple("LoadResult", "status value error")):
    """
    the outcome of loading an optional tag file: it was either LOADED (with
    its parsed contents in value), ABSENT (the caller should use defaults),
    or MALFORMED (error holds the exception that was encountered).
    """
    __slots__ = ()

    @property
    def loaded(self):
        return self.status == LOADED

    @property
    def absent(self):
        return self.status == ABSENT

    @property
    def malformed(self):
        return self.status == MALFORMED

def split_lines(text):
    """
    split the contents of a tag file into lines, dropping any empty ones.
    Leading white space on each line is preserved.
    """
    return [l for l in _linesepre.split(text) if l]

def read_encoding(encoding):
    """
    return the encoding label to use when reading a tag file written in the
    given encoding.  A UTF-8 byte-order mark is tolerated when reading.
    """
    if encoding and encoding.replace('_', '-').lower() in ("utf-8", "utf8"):
        return "utf-8-sig"
    return encoding

def load_tag_file(filesys, path, encoding, parser):
    """
    read and parse a tag file from a bag's filesystem.

    :param FS filesys:     the filesystem (usually rooted at the bag's root
                           directory) to read from
    :param str path:       the path to the file within filesys
    :param str encoding:   the tag file encoding to decode the file with
    :param func parser:    a function that accepts a list of lines and
                           returns the parsed contents
    :rtype: LoadResult
    """
    if not filesys.isfile(path):
        return LoadResult(ABSENT, None, None)

    try:
        text = filesys.readtext(path, encoding=read_encoding(encoding))
        return LoadResult(LOADED, parser(split_lines(text)), None)
    except (BagFormatError, ValueError, LookupError, FSError) as ex:
        # ValueError includes UnicodeDecodeError
        LOGGER.warning("Unable to load %s: %s", path, str(ex))
        return LoadResult(MALFORMED, None, ex)

def write_tag_file(filesys, path, lines, encoding):
    """
    write the given lines (each with its own line terminator) to a tag file
    in a bag's filesystem, encoding it with the given encoding.
    """
    filesys.writetext(path, "".join(lines), encoding=encoding)
