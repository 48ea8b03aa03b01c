"""
Custom exception classes.

These vary in use case from "we needed to carry errno details around as a
plain value" to simply "we needed to express an error condition in a way
easily told apart from other, truly unexpected errors".
"""


class ParseError(Exception):
    """
    An error arising from the parsing of command-line flags/arguments.

    Missing flag values, unknown flags, too many or too few filenames, etc.
    """

    def __init__(self, msg, value=None):
        super().__init__(msg)
        self.value = value


class ConfigurationError(ParseError):
    """
    A command-line value was syntactically fine but unusable.

    E.g. a non-numeric ``-s`` or a ``-c`` outside of its bounds. ``value``
    holds the offending raw value as given by the user.
    """

    pass


class SetupError(Exception):
    """
    The target file could not be prepared for writing.

    Carries the ``path`` involved plus the ``errno``/``strerror`` pair from
    the underlying `OSError`. Subclasses name the failing system call.
    """

    #: Name of the failing system call, as shown to the user.
    call = None
    #: Human readable description of what was being attempted.
    action = None

    def __init__(self, path, errno, strerror):
        super().__init__(path, errno, strerror)
        self.path = path
        self.errno = errno
        self.strerror = strerror

    @classmethod
    def from_oserror(cls, path, error):
        return cls(path, error.errno, error.strerror)

    def __str__(self):
        return "Unable to {} {} : {}() returned {} ({})".format(
            self.action, self.path, self.call, self.errno, self.strerror
        )


class OpenError(SetupError):
    """
    The target file could not be created, opened or truncated.
    """

    call = "open"
    action = "open"


class LockError(SetupError):
    """
    An exclusive lock was requested but could not be placed on the file.
    """

    call = "flock"
    action = "place lock on"


class WriteFailure(Exception):
    """
    A single ``write()`` call failed.

    Unlike the other classes here, this one is not raised out of the write
    loop: instances are attached to `.Measurement` objects so the loop can
    inspect them and keep count of consecutive failures.
    """

    def __init__(self, errno, strerror):
        super().__init__(errno, strerror)
        self.errno = errno
        self.strerror = strerror

    @classmethod
    def from_oserror(cls, error):
        return cls(error.errno, error.strerror)

    def __str__(self):
        return "write() failed with errno {} ({})".format(
            self.errno, self.strerror
        )


class Exit(Exception):
    """
    Simple stand-in for SystemExit that lets us gracefully exit.

    Removes lots of scattered sys.exit calls, improves testability.
    """

    def __init__(self, code=0):
        self.code = code
