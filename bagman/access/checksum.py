"""
checksum calculation for the files in a bag
"""
import hashlib, logging

from bagit import HASH_BLOCK_SIZE

from ..constants import HASH_LENGTHS
from .exceptions import BagConfigurationError

LOGGER = logging.getLogger(__name__)

def check_algorithm(algorithm):
    """
    return the normalized (lower-case) name of a checksum algorithm, making
    sure it is one supported for manifests.

    :raises BagConfigurationError:  if the algorithm is not supported
    """
    alg = str(algorithm).lower()
    if alg not in HASH_LENGTHS:
        raise BagConfigurationError("Invalid hash algorithm: '{0}'"
                                    .format(algorithm))
    return alg

class ChecksumEngine(object):
    """
    a calculator of file checksums bound to a particular algorithm
    """

    def __init__(self, algorithm):
        """
        :param str algorithm:  the checksum algorithm, either "sha1" or "md5"
        :raises BagConfigurationError:  if the algorithm is not supported
        """
        self._alg = check_algorithm(algorithm)

    @property
    def algorithm(self):
        return self._alg

    @property
    def hash_length(self):
        """
        the number of hex characters in the checksums this engine produces
        """
        return HASH_LENGTHS[self._alg]

    def checksum_stream(self, stream):
        """
        return the hex checksum of the bytes read from the given (binary)
        file-like object
        """
        hasher = hashlib.new(self._alg)
        while True:
            block = stream.read(HASH_BLOCK_SIZE)
            if not block:
                break
            hasher.update(block)
        return hasher.hexdigest()

    def checksum(self, filesys, path):
        """
        return the hex checksum of the file at the given path.

        :param FS filesys:  the filesystem containing the file
        :param str path:    the path to the file within filesys
        """
        LOGGER.debug("Calculating %s checksum for %s", self._alg, path)
        with filesys.openbin(path) as fd:
            return self.checksum_stream(fd)
