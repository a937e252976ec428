"""
functions for serializing a bag into a compressed archive file and for
unpacking such a file back into a bag directory.
"""
import os, re, shutil, tempfile, tarfile, zipfile, logging

import fs.osfs, fs.zipfs, fs.tarfs
from fs.copy import copy_dir, copy_fs
from fs.errors import FSError

from .constants import ZIP, TGZ, PACKAGE_METHODS, ARCHIVE_EXTENSIONS, BAGIT_FILE
from .access.exceptions import BagFormatError, BagConfigurationError

LOGGER = logging.getLogger(__name__)

_archnamere = re.compile(r'^(.*)\.(zip|tar\.gz|tgz)$', re.I)

def _open_zip_for_write(path):
    return fs.zipfs.ZipFS(path, write=True)

def _open_tgz_for_write(path):
    return fs.tarfs.TarFS(path, write=True, compression="gz")

_writers = { ZIP: _open_zip_for_write, TGZ: _open_tgz_for_write }
_readers = { ZIP: fs.zipfs.ZipFS, TGZ: fs.tarfs.TarFS }

def check_method(method):
    """
    return the normalized name of a packaging method, making sure that it
    is supported.

    :raises BagConfigurationError:  if the method is not "zip" or "tgz"
    """
    meth = str(method).lower()
    if meth not in PACKAGE_METHODS:
        raise BagConfigurationError("Invalid compression method: '{0}'"
                                    .format(method))
    return meth

def archive_destination(destination, method):
    """
    return the destination file path with the method's extension appended
    to it if it is not already there.
    """
    ext = "." + check_method(method)
    if not destination.lower().endswith(ext):
        destination += ext
    return destination

def archive_method(path):
    """
    return the packaging method used to create the archive file at the
    given path, as determined by its extension, or None if the extension
    is not recognized.
    """
    lpath = path.lower()
    for ext, method in ARCHIVE_EXTENSIONS.items():
        if lpath.endswith(ext):
            return method
    return None

def package_bag(bagdir, destination, method=TGZ):
    """
    serialize the bag with the given root directory into an archive file.
    The bag's root directory is the single top-level entry in the archive.

    :param str bagdir:       the bag's root directory
    :param str destination:  the path of the archive to write; the extension
                             for the method is added if it is missing.
    :param str method:       the packaging method, "zip" or "tgz"
    :return:  the path to the archive that was written
    :rtype: str
    :raises BagConfigurationError:  if the method is not supported
    """
    method = check_method(method)
    destination = archive_destination(destination, method)

    bagdir = os.path.abspath(bagdir)
    parent, name = os.path.split(bagdir)

    tmpdir = tempfile.mkdtemp(prefix="bagit_")
    try:
        tmpfile = os.path.join(tmpdir, name + "." + method)
        with fs.osfs.OSFS(parent) as srcfs, _writers[method](tmpfile) as outfs:
            copy_dir(srcfs, name, outfs, name)
        shutil.move(tmpfile, destination)
    finally:
        shutil.rmtree(tmpdir, ignore_errors=True)

    LOGGER.info("Packaged bag %s into %s", bagdir, destination)
    return destination

def _find_bag_root(archfs):
    if archfs.isfile(BAGIT_FILE):
        return ""
    names = sorted(archfs.listdir("/"))
    for name in names:
        if archfs.isfile("/".join([name, BAGIT_FILE])):
            return name

    # a lone top-level directory is the bag root even without bagit.txt
    dirs = [n for n in names if archfs.isdir(n)]
    if len(dirs) == 1:
        return dirs[0]
    return None

def extract_bag(archive, destdir=None):
    """
    unpack a serialized bag into a directory.

    :param str archive:   the path to the archive file (.zip, .tar.gz, or .tgz)
    :param str destdir:   the directory to unpack into; if not provided,
                          a new temporary directory is created.
    :return:  the path to the root directory of the unpacked bag.  This is
              the top-level directory in the archive containing bagit.txt,
              or the only top-level directory if none contains it,
              and otherwise the directory named after the archive file.
    :rtype: str
    :raises BagFormatError:  if the file name is not recognized as an
                             archive or the file cannot be unpacked
    """
    method = archive_method(archive)
    m = _archnamere.match(os.path.basename(archive))
    if not method or not m:
        raise BagFormatError("Invalid compressed bag name: "+archive, archive)

    if not destdir:
        destdir = tempfile.mkdtemp(prefix="bagit_")

    try:
        with _readers[method](archive) as archfs, fs.osfs.OSFS(destdir) as dst:
            copy_fs(archfs, dst)
            name = _find_bag_root(archfs)
    except (zipfile.BadZipFile, tarfile.TarError, FSError) as ex:
        raise BagFormatError("Unable to unpack {0}: {1}".format(archive, str(ex)),
                             archive)

    if name is None:
        name = m.group(1)
    LOGGER.info("Unpacked %s into %s", archive, destdir)
    return os.path.join(destdir, name).rstrip(os.sep)
