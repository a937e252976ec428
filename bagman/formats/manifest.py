"""
functions for converting manifest files to and from a mapping of file paths
to checksums.
"""
import logging
from collections import OrderedDict

LOGGER = logging.getLogger(__name__)

def parse_manifest(lines, hash_length):
    """
    parse the lines of a (tag) manifest file into an ordered mapping of
    file paths to checksums.

    Each line is split positionally: the first hash_length characters make
    up the checksum and the rest, stripped of surrounding white space, is
    the path.  Lines with no path are ignored.  If a path appears more than
    once, the last checksum given wins.

    :param lines:          the lines from the manifest file
    :type lines:           list of str
    :param int hash_length:  the number of hex characters in the checksums
                           (40 for sha1, 32 for md5)
    :rtype: OrderedDict
    """
    manifest = OrderedDict()
    for line in lines:
        path = line[hash_length:].strip()
        if not path:
            LOGGER.debug("Skipping manifest line without a path: %s",
                         line.strip())
            continue
        manifest[path] = line[:hash_length].strip()
    return manifest

def format_manifest(manifest):
    """
    format a mapping of file paths to checksums into the lines of a manifest
    file, sorted by path.  Each line includes its trailing newline.
    """
    return ["{0} {1}\n".format(manifest[path], path)
            for path in sorted(manifest.keys())]
