"""
This module restores the consistency between a bag's payload and its
manifests.  It cleans up the names of payload files and regenerates the
payload manifest and the tag manifest from what is found on disk.
"""
import logging
from collections import OrderedDict

from .constants import (ALGORITHMS, BAGIT_FILE, BAG_INFO_FILE, FETCH_FILE,
                        manifest_name, tagmanifest_name)
from .sanitize import sanitize_filename
from .access.checksum import ChecksumEngine
from .access.payload import payload_files
from .access.exceptions import BagError
from .formats import write_tag_file
from .formats.manifest import format_manifest

LOGGER = logging.getLogger(__name__)

def update_bag(bag):
    """
    bring the manifests of the given bag up to date with its payload.

    :param bag:  the bag to update, either as a Bag instance or the path
                 to its root directory
    :type bag:   Bag or str
    :return:  the updated Bag instance
    """
    from .access.bag import Bag
    if not isinstance(bag, Bag):
        bag = Bag(bag)
    bag.update()
    return bag

class Updater(object):
    """
    This class collects the operations that regenerate a bag's manifests.

    The job is done most easily by instantiating this class and calling
    the update() method, which calls clean_payload_names(),
    clear_manifests(), update_payload_manifest(), and
    update_tag_manifest() in sequence.  Running update() twice with no
    intervening change to the bag produces identical manifest files.

    Failures (e.g. an unreadable file or a renaming conflict) are raised
    immediately.
    """

    def __init__(self, filesys, algorithm, encoding):
        """
        Initialize the object that will update a bag.

        :param FS filesys:     the filesystem rooted at the bag's root
                               directory
        :param str algorithm:  the checksum algorithm to use for the new
                               manifests
        :param str encoding:   the bag's tag file encoding
        """
        self.fs = filesys
        self.engine = ChecksumEngine(algorithm)
        self.encoding = encoding

    @property
    def manifest_name(self):
        return manifest_name(self.engine.algorithm)

    @property
    def tagmanifest_name(self):
        return tagmanifest_name(self.engine.algorithm)

    def clear_manifests(self):
        """
        remove all manifest and tag manifest files, for any supported
        algorithm, from the bag.
        """
        for alg in ALGORITHMS:
            for name in (manifest_name(alg), tagmanifest_name(alg)):
                if self.fs.isfile(name):
                    LOGGER.debug("Removing %s", name)
                    self.fs.remove(name)

    def clean_payload_names(self):
        """
        rename any payload file whose name is not safe (according to
        sanitize_filename()).  A file left with no safe name is deleted.

        :raises BagError:  if a cleaned name would replace another payload
                           file; no files are renamed in that case.
        """
        renames = []
        targets = {}
        for path in list(payload_files(self.fs)):
            parent, base = path.rsplit('/', 1)
            clean = sanitize_filename(base)
            if clean is None:
                renames.append((path, None))
                continue
            if clean == base:
                continue

            target = parent + '/' + clean
            if self.fs.exists(target) or target in targets:
                other = target if self.fs.exists(target) else targets[target]
                raise BagError("Cannot rename payload file {0} to {1}: "
                               "conflicts with {2}".format(path, clean, other))
            targets[target] = path
            renames.append((path, target))

        for path, target in renames:
            if target is None:
                LOGGER.info("Deleting payload file with no safe name: %s", path)
                self.fs.remove(path)
                continue
            if target.rsplit('/', 1)[1].startswith('.'):
                # hidden files are not part of the payload
                LOGGER.warning("Payload file %s renamed to hidden file %s; "
                               "it will be left out of the manifest",
                               path, target)
            else:
                LOGGER.info("Renaming payload file %s to %s", path, target)
            self.fs.move(path, target)

    def make_manifest(self, paths):
        """
        compute the checksums for the given files, returning them as a
        mapping of path to checksum.  Files that do not exist are skipped.
        """
        out = OrderedDict()
        for path in paths:
            if self.fs.isfile(path):
                out[path] = self.engine.checksum(self.fs, path)
        return out

    def write_manifest(self, name, manifest):
        write_tag_file(self.fs, name, format_manifest(manifest), self.encoding)
        LOGGER.info("Wrote %s (%d entries)", name, len(manifest))

    def update_payload_manifest(self):
        """
        compute and write the payload manifest
        :rtype: OrderedDict
        """
        manifest = self.make_manifest(payload_files(self.fs))
        self.write_manifest(self.manifest_name, manifest)
        return manifest

    def update_tag_manifest(self):
        """
        compute and write the tag manifest.  It covers bagit.txt,
        bag-info.txt, fetch.txt, and the payload manifest (those of them
        that exist).
        :rtype: OrderedDict
        """
        manifest = self.make_manifest([BAGIT_FILE, BAG_INFO_FILE, FETCH_FILE,
                                       self.manifest_name])
        self.write_manifest(self.tagmanifest_name, manifest)
        return manifest

    def update(self):
        """
        regenerate the bag's manifests.
        :return:  a 2-tuple holding the new payload manifest and tag manifest
        """
        self.clean_payload_names()
        self.clear_manifests()
        manifest = self.update_payload_manifest()
        tagmanifest = self.update_tag_manifest()
        return manifest, tagmanifest
