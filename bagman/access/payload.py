"""
functions for listing the files that make up a bag's payload
"""
from ..constants import DATA_DIR

HIDDEN = [".*"]

def payload_files(filesys, datadir=DATA_DIR):
    """
    iterate through the paths of the (non-hidden) payload files in a bag.
    The paths are relative to the bag's root directory, delimited with '/',
    and returned in sorted order.  Files below hidden directories are
    skipped as well.

    :param FS filesys:   the filesystem rooted at the bag's root directory
    :param str datadir:  the name of the payload directory
    """
    if not filesys.isdir(datadir):
        return
    files = filesys.walk.files(datadir, exclude=HIDDEN, exclude_dirs=HIDDEN)
    for f in sorted(f.lstrip('/') for f in files):
        yield f

def is_dangerous(path):
    """
    return True if the given path, meant to be relative to a bag's root
    directory, could point outside of that directory.
    """
    if not path or path.startswith('/') or path.startswith('~'):
        return True
    if ':' in path.split('/')[0] or '\\' in path:
        return True

    depth = 0
    for part in path.split('/'):
        if part == '..':
            depth -= 1
            if depth < 0:
                return True
        elif part and part != '.':
            depth += 1
    return False
