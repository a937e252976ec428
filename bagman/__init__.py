"""
a library for creating, validating, and packaging BagIt bags.

The main bagman module provides the Bag class in which an instance wraps a
bag on local disk (either a directory or a serialized .zip, .tar.gz, or
.tgz file).  It keeps the bag's manifests consistent with its payload
(update()), checks the payload against the manifest (validate()), retrieves
remote payload files listed in fetch.txt (fetch()), and serializes the bag
(package()).
"""
from .access.bag import Bag
from .access.exceptions import (BagError, BagFormatError, BagConfigurationError,
                                FetchError, BagIntegrityError)
from .validate import ValidationIssue, BagValidator, validate_bag
from .sanitize import sanitize_filename
from .update import update_bag
from .fetch import fetch_bag
from .package import package_bag, extract_bag
