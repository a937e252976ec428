"""
Common data about the bag layout and the defaults used when creating bags.
"""
import re

DEFAULT_VERSION = "0.96"
DEFAULT_ENCODING = "UTF-8"
DEFAULT_ALGORITHM = "sha1"

# supported checksum algorithms mapped to the width of their hex digests
HASH_LENGTHS = { "sha1": 40, "md5": 32 }
ALGORITHMS = tuple(HASH_LENGTHS.keys())

DATA_DIR = "data"
BAGIT_FILE = "bagit.txt"
BAG_INFO_FILE = "bag-info.txt"
FETCH_FILE = "fetch.txt"
MANIFEST_TMPL = "manifest-{0}.txt"
TAGMANIFEST_TMPL = "tagmanifest-{0}.txt"

UNKNOWN_LENGTH = "-"

RESERVED_NAMES = ["CON", "PRN", "AUX", "NUL"] + \
                 ["COM%d" % i for i in range(1, 10)] + \
                 ["LPT%d" % i for i in range(1, 10)]

ZIP = "zip"
TGZ = "tgz"
PACKAGE_METHODS = (ZIP, TGZ)
ARCHIVE_EXTENSIONS = { ".zip": ZIP, ".tar.gz": TGZ, ".tgz": TGZ }

# (connect, read) timeouts, in seconds, for fetch downloads
DEFAULT_FETCH_TIMEOUT = (15, 300)

_version_re = re.compile(r"BagIt-Version: (\d+)\.(\d+)", re.I)
_encoding_re = re.compile(r"Tag-File-Character-Encoding: (.*)", re.I)

def manifest_name(algorithm):
    """
    return the name of the payload manifest file for the given algorithm
    """
    return MANIFEST_TMPL.format(algorithm)

def tagmanifest_name(algorithm):
    """
    return the name of the tag manifest file for the given algorithm
    """
    return TAGMANIFEST_TMPL.format(algorithm)

def _2int(sint):
    try:
        return int(sint)
    except ValueError:
        return -1

class Version(object):
    """
    a version class that can facilitate comparisons
    """

    def __init__(self, vers):
        """
        convert a version string to a Version instance
        """
        if isinstance(vers, str):
            self._vs = vers
            self.fields = tuple([_2int(v) for v  in self._vs.split('.')])
        elif isinstance(vers, tuple):
            self._vs = ".".join([str(v) for v in vers])
            self.fields = tuple(vers)
        else:
            raise TypeError("Input version is not str or tuple: " + str(vers))

    @property
    def major(self):
        return self.fields[0]

    @property
    def minor(self):
        return (len(self.fields) > 1 and self.fields[1]) or 0

    def __str__(self):
        return self._vs

    def __repr__(self):
        return "Version('{0}')".format(self._vs)

    def __hash__(self):
        return hash(self.fields)

    def __eq__(self, other):
        if not isinstance(other, Version):
            other = Version(other)
        return self.fields == other.fields

    def __lt__(self, other):
        if not isinstance(other, Version):
            other = Version(other)
        return self.fields < other.fields

    def __le__(self, other):
        if not isinstance(other, Version):
            other = Version(other)
        return self < other or self == other

    def __ge__(self, other):
        return not (self < other)
    def __gt__(self, other):
        return not self.__le__(other)
    def __ne__(self, other):
        return not (self == other)

def parse_bagit_declaration(text):
    """
    extract the version and tag file encoding from the contents of a
    bagit.txt file.

    :param str text:  the full contents of the bagit.txt file
    :return:  a 2-tuple containing the Version and the encoding label; the
              encoding will be None if the file does not declare one.
    :rtype: tuple
    :raises ValueError:  if a version declaration cannot be found
    """
    m = _version_re.search(text)
    if not m:
        raise ValueError("No BagIt-Version declaration found")
    version = Version((int(m.group(1)), int(m.group(2))))

    encoding = None
    m = _encoding_re.search(text)
    if m:
        encoding = m.group(1).strip() or None
    return version, encoding

def format_bagit_declaration(version, encoding):
    """
    return the contents of a bagit.txt file declaring the given version
    and tag file encoding.
    """
    if not isinstance(version, Version):
        version = Version(version)
    return "BagIt-Version: {0}.{1}\nTag-File-Character-Encoding: {2}\n" \
           .format(version.major, version.minor, encoding)
