"""
A subpackage for accessing a bag's contents.

The :py:mod:`bag` module provides the Bag class, the interface for working
with a bag on disk.  The :py:mod:`checksum` and :py:mod:`payload` modules
provide the checksum calculation and payload listing it relies on.
"""
