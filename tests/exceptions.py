import errno
import os

from timedwriter import (
    ConfigurationError,
    Exit,
    LockError,
    OpenError,
    ParseError,
    SetupError,
    WriteFailure,
)


class ParseError_:
    def keeps_offending_value(self):
        e = ConfigurationError("Invalid sleep time: 0", "0")
        assert e.value == "0"
        assert str(e) == "Invalid sleep time: 0"

    def value_is_optional(self):
        assert ParseError("Command line gibberish, try -h").value is None


class SetupError_:
    def subclasses_name_their_syscall(self):
        assert issubclass(OpenError, SetupError)
        assert issubclass(LockError, SetupError)
        assert str(OpenError("f", 13, "Permission denied")) == (
            "Unable to open f : open() returned 13 (Permission denied)"
        )
        assert str(LockError("f", 9, "Bad file descriptor")) == (
            "Unable to place lock on f : flock() returned 9 (Bad file descriptor)" # noqa
        )

    def from_oserror(self):
        error = OSError(errno.EACCES, os.strerror(errno.EACCES))
        e = OpenError.from_oserror("/root/x", error)
        assert e.path == "/root/x"
        assert e.errno == errno.EACCES
        assert e.strerror == os.strerror(errno.EACCES)


class WriteFailure_:
    def displays_errno_and_reason(self):
        e = WriteFailure.from_oserror(OSError(errno.ENOSPC, "No space left"))
        assert e.errno == errno.ENOSPC
        assert str(e) == "write() failed with errno {} (No space left)".format(
            errno.ENOSPC
        )


class Exit_:
    def defaults_to_zero(self):
        assert Exit().code == 0

    def takes_code(self):
        assert Exit(1).code == 1
