"""
This module normalizes payload file names into names that are safe to use
on any of the filesystems a bag may be transferred to.
"""
import re, random, string

from .constants import RESERVED_NAMES

_spacere = re.compile(r'\s+')
_badcharre = re.compile(r'[~^@!#%&*/:\'?"<>|]')
_reservedre = re.compile(r'^(' + '|'.join(RESERVED_NAMES) + r')$', re.I)

SUFFIX_LENGTH = 12

def _random_suffix():
    return "".join(random.sample(string.ascii_lowercase, SUFFIX_LENGTH))

def sanitize_filename(name):
    """
    return a version of the given file name that is safe for use in a bag's
    payload.

    Runs of white space are turned into a single underscore; the characters
    ``~^@!#%&*/:'?"<>|`` and the substring ``..`` are removed; and a name
    matching a reserved device name (e.g. ``CON`` or ``LPT1``) is lowercased
    and given a random suffix to make it unique.  Applying this function to
    its own output returns that output unchanged.

    :param str name:  the base name of a file (without any directory part)
    :return:  the cleaned name, or None if nothing safe remains of the name,
              in which case the file should be discarded.
    :rtype: str
    """
    name = _spacere.sub('_', name)
    name = _badcharre.sub('', name)
    while '..' in name:
        name = name.replace('..', '')

    if _reservedre.match(name):
        name = "{0}_{1}".format(name.lower(), _random_suffix())

    return name or None
