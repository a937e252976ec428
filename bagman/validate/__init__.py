"""
This module provides classes and functions for validating bags.
"""
from .base import (Validator, ValidationIssue, BagIntegrityError,
                   MISSING_FROM_MANIFEST, CHECKSUM_MISMATCH, UNVERIFIABLE)
from .bag import BagValidator, validate as validate_bag
