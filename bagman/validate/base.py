"""
This module provides base classes and infrastructure for bag validation
"""
from collections import namedtuple

from ..access.exceptions import BagIntegrityError

MISSING_FROM_MANIFEST = "File missing from manifest."
CHECKSUM_MISMATCH = "Checksum mismatch."
UNVERIFIABLE = "Unable to verify manifest."

class ValidationIssue(namedtuple("ValidationIssue", "subject message")):
    """
    a problem detected with a bag.  The subject is either the path to the
    offending file (relative to the bag's root directory) or a label
    identifying the aspect of the bag that was checked (e.g. "fetch");
    the message is a prose description of the problem.
    """
    __slots__ = ()

    def __str__(self):
        return "{0}: {1}".format(self.subject, self.message)

class Validator(object):
    """
    a base class for a class that will apply validation tests to a bag set
    at construction.

    This base implementation runs no tests; validate() by default simply
    returns an empty list.  Subclasses should override validate() to run its
    tests and return the issues found.
    """

    def __init__(self, target):
        """
        initialize the validator

        :param target:  the bag being validated.
        """
        self.target = target

    def validate(self):
        """
        run the embedded tests, returning a list of ValidationIssue instances.
        If the returned list is empty, then the bag is considered valid.
        """
        return []

    def is_valid(self):
        """
        run the embedded tests and return True if no issues were found.
        """
        return len(self.validate()) == 0

    def ensure_valid(self):
        """
        run the embedded tests; if any issues are found, raise a
        BagIntegrityError.

        :raise BagIntegrityError:  if any of the tests fail.
        """
        issues = self.validate()
        if issues:
            raise BagIntegrityError(issues)
