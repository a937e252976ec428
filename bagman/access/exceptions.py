"""
exceptions that can be raised while accessing or updating a bag's contents
"""
import bagit

class BagError(bagit.BagError):
    """
    a general exception while working with a bag
    """
    pass

class BagFormatError(BagError):
    """
    an exception indicating that a bag file or name could not be understood;
    e.g. an unparseable tag file or an unrecognized archive name.
    """
    def __init__(self, message, filepath=None):
        """
        initialize the exception
        :param str message:    the exception's message
        :param str filepath:   the path to the offending file, if applicable
        """
        self.file = filepath
        super(BagFormatError, self).__init__(message)

class BagConfigurationError(BagError, ValueError):
    """
    an exception indicating that an unsupported option was requested, such
    as an unknown checksum algorithm or packaging method.
    """
    pass

class FetchError(BagError):
    """
    an exception indicating that a remote file listed in fetch.txt could
    not be retrieved.
    """
    def __init__(self, url, message=None, cause=None):
        """
        initialize the exception with the URL that could not be fetched
        :param str url:        the URL of the remote file
        :param str message:    the exceptions message, overriding the default
                               (generated from the URL)
        :param Exception cause:  the underlying exception, if any
        """
        self.url = url
        self.cause = cause
        if not message:
            message = "URL {0} could not be downloaded.".format(url)
        super(FetchError, self).__init__(message)

class BagIntegrityError(bagit.BagValidationError):
    """
    An exception indicating that a bag's payload is not consistent with its
    manifest.

    This class differs from the bagit.BagValidationError in that it carries
    along all of the detected issues as a list of ValidationIssue instances
    ("issues").
    """
    def __init__(self, issues):
        self.issues = list(issues)

        if len(self.issues) == 0:
            # shouldn't happen
            msg = "Unknown bag validation failure"
        elif len(self.issues) == 1:
            msg = str(self.issues[0])
        else:
            msg = "{0} validation errors detected".format(len(self.issues))

        super(BagIntegrityError, self).__init__(msg,
                                                [str(i) for i in self.issues])

    def __str__(self):
        if len(self.issues) < 2:
            return self.message

        out = self.message
        if len(self.issues) > 3:
            out += ", including"
        out += ":"
        for issue in self.issues[0:3]:
            out += "\n * " + str(issue)
        return out
