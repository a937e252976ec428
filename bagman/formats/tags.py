"""
support for the simple ``Key: value`` tag file format used by bag-info.txt
(and bagit.txt).
"""
import re
from collections import OrderedDict
from collections.abc import MutableMapping

from ..access.exceptions import BagFormatError

_colonre = re.compile(r':\s*')
_contindent = "  "

class TagFields(MutableMapping):
    """
    the contents of a tag file: an ordered mapping of tag names to values.

    Lookups are case-insensitive: ``fields['source-organization']`` and
    ``fields['SOURCE-ORGANIZATION']`` return the same value.  The name is
    stored once; the case under which it was first set is the one used
    when the fields are formatted for writing.
    """

    def __init__(self, data=None):
        self._data = OrderedDict()
        if data:
            self.update(data)

    @staticmethod
    def _canon(key):
        return key.lower()

    def __getitem__(self, key):
        return self._data[self._canon(key)][1]

    def __setitem__(self, key, value):
        canon = self._canon(key)
        if canon in self._data:
            key = self._data[canon][0]
        self._data[canon] = (key, value)

    def __delitem__(self, key):
        del self._data[self._canon(key)]

    def __iter__(self):
        for key, value in self._data.values():
            yield key

    def __len__(self):
        return len(self._data)

    def __contains__(self, key):
        return isinstance(key, str) and self._canon(key) in self._data

    def __repr__(self):
        return "TagFields({0})".format(dict(self.items()))

    def __eq__(self, other):
        if not isinstance(other, (TagFields, dict)):
            return NotImplemented
        if len(self) != len(other):
            return False
        return all(k in self and self[k] == v for k, v in other.items())

    def __ne__(self, other):
        return not (self == other)

    @classmethod
    def parse(cls, lines):
        """
        parse the lines of a tag file into a TagFields instance.  A line that
        starts with white space continues the value of the previous tag; it
        is appended to that value after a single space.

        :param lines:  the (non-empty) lines from the tag file
        :type lines:   list of str
        :raises BagFormatError:  if a continuation line appears before any
                                 tag or a tag line has no colon.
        """
        out = cls()
        prev = None
        for line in lines:
            if not line.strip():
                continue

            if line[0] in " \t":
                if prev is None:
                    raise BagFormatError("Tag file continuation line with no "+
                                         "preceding tag: " + line.strip())
                out[prev] = out[prev] + " " + line.strip()
                continue

            parts = _colonre.split(line, maxsplit=1)
            if len(parts) < 2:
                raise BagFormatError("Tag file line missing colon: " +
                                     line.strip())
            prev = parts[0]
            out[prev] = parts[1].strip()

        return out

    def format(self):
        """
        format the fields into lines for writing to a tag file, one per tag.
        Each line includes its trailing newline.  A value containing newline
        characters is written with indented continuation lines.
        """
        out = []
        for key, value in self.items():
            vlines = [v.strip() for v in str(value).splitlines() if v.strip()]
            if not vlines:
                vlines = [""]
            out.append("{0}: {1}\n".format(key, vlines[0]))
            out.extend([_contindent + v + "\n" for v in vlines[1:]])
        return out
