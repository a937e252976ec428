"""
This module provides the validator that checks a bag's payload against its
manifest.
"""
import logging

from fs.errors import FSError

from .base import (Validator, ValidationIssue, MISSING_FROM_MANIFEST,
                   CHECKSUM_MISMATCH, UNVERIFIABLE)
from ..constants import BAGIT_FILE, DATA_DIR
from ..access.payload import payload_files

LOGGER = logging.getLogger(__name__)

class BagValidator(Validator):
    """
    A validator that tests whether the files in a bag's payload directory
    match the checksums recorded in the bag's (in-memory) payload manifest.

    Only files found on disk are checked: a manifest entry for a file that
    is not present is not reported.  (Bag.compare_manifest_with_fs() will
    list such entries.)
    """

    def __init__(self, bag):
        """
        initialize the validator for the given bag.

        :param Bag bag:  the target bag
        """
        super(BagValidator, self).__init__(bag)
        self.bag = bag

    def _check_exists(self, path, issues):
        if not self.bag.filesystem.exists(path):
            issues.append(ValidationIssue(path,
                                          "{0} does not exist.".format(path)))
            return False
        return True

    def _checksum(self, engine, path):
        # an unreadable file cannot match its recorded checksum
        try:
            return engine.checksum(self.bag.filesystem, path)
        except (OSError, FSError) as ex:
            LOGGER.warning("Could not read %s: %s", path, str(ex))
            return None

    def validate(self):
        bag = self.bag
        issues = []

        self._check_exists(BAGIT_FILE, issues)
        hasdata = self._check_exists(DATA_DIR, issues)
        hasmanifest = self._check_exists(bag.manifest_name, issues)

        if hasdata and hasmanifest:
            engine = bag.checksum_engine
            manifest = bag.manifest
            for path in payload_files(bag.filesystem):
                expected = manifest.get(path)
                if expected is None:
                    issues.append(ValidationIssue(path, MISSING_FROM_MANIFEST))
                elif expected.lower() != self._checksum(engine, path):
                    issues.append(ValidationIssue(path, CHECKSUM_MISMATCH))
        else:
            issues.append(ValidationIssue("checksum verification",
                                          UNVERIFIABLE))

        for issue in issues:
            LOGGER.debug("%s: %s", bag, str(issue))
        return issues

def validate(bag):
    """
    validate the given bag, returning the list of issues found.  The bag
    is valid if the list is empty.
    """
    return BagValidator(bag).validate()
