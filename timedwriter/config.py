"""
Run configuration: defaults, bounds and validation of user-supplied values.

A `RunConfig` is built once, from the command line, before any file is
touched. It is a tuple subclass and therefore immutable; every numeric field
is checked against its bounds at construction time.
"""

from collections import namedtuple
import re

from .exceptions import ConfigurationError
from .util import debug


INTERVAL_DEFAULT = 5
INTERVAL_MIN = 1
INTERVAL_MAX = 60 * 60
ITERATION_MAX = 666
FAILURE_DEFAULT = 5
FAILURE_MAX = 100
BLOCK_SIZE_DEFAULT = 1024
BLOCK_SIZE_MAX = 1024 * 1024 * 32

#: Plain ASCII base-10 integers, optionally signed & space-padded.
INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)


def to_int(value, minimum, maximum, label):
    """
    Turn ``value`` into an int within ``[minimum, maximum]``, or die trying.

    ``value`` may already be an int (e.g. a default) or the raw string seen on
    the command line. ``label`` completes the ``"Invalid <label>: <value>"``
    message of the `.ConfigurationError` raised on failure.
    """
    err = "Invalid {}: {}".format(label, value)
    # bool is an int subclass; True/False are never meaningful here.
    if isinstance(value, bool):
        raise ConfigurationError(err, value)
    if isinstance(value, str):
        # int() alone would also take "1_0" or non-ASCII digits.
        if not INTEGER.fullmatch(value):
            raise ConfigurationError(err, value)
    elif not isinstance(value, int):
        raise ConfigurationError(err, value)
    number = int(value)
    if not minimum <= number <= maximum:
        raise ConfigurationError(err, value)
    return number


_fields = (
    "filename",
    "interval",
    "iterations",
    "max_failures",
    "block_size",
    "exclusive_lock",
)


class RunConfig(namedtuple("RunConfig", _fields)):
    """
    Immutable, validated settings for a single writer run.

    :param str filename: Path of the file to create (or truncate) and write.

    :param interval:
        Seconds to sleep after each write but the last. Bounds: ``[1,
        3600]``.

    :param iterations: Number of writes to perform. Bounds: ``(0, 666]``.

    :param max_failures:
        Consecutive ``write()`` failures tolerated before giving up; ``0``
        means failures never stop the run. Bounds: ``[0, 100]``.

    :param block_size:
        Bytes per write. ``0`` (the default) means "write the iteration index
        followed by a newline" instead of a fixed-size block. Bounds: ``[0,
        33554432]``.

    :param bool exclusive_lock:
        Whether to hold an exclusive advisory lock on the file for the
        duration of the run.

    Numeric values may be given as ints or as their string representation;
    either way they're converted and bounds-checked here, raising
    `.ConfigurationError` on any problem.
    """

    __slots__ = ()

    def __new__(
        cls,
        filename,
        interval=INTERVAL_DEFAULT,
        iterations=ITERATION_MAX,
        max_failures=FAILURE_DEFAULT,
        block_size=0,
        exclusive_lock=False,
    ):
        if not filename:
            raise ConfigurationError(
                "Expecting one, and only one, FILENAME", filename
            )
        config = super().__new__(
            cls,
            filename=filename,
            interval=to_int(
                interval, INTERVAL_MIN, INTERVAL_MAX, "sleep time"
            ),
            iterations=to_int(iterations, 1, ITERATION_MAX, "max iterations"),
            max_failures=to_int(
                max_failures,
                0,
                FAILURE_MAX,
                "max consecutive write failures",
            ),
            block_size=to_int(
                block_size, 0, BLOCK_SIZE_MAX, "write block size"
            ),
            exclusive_lock=bool(exclusive_lock),
        )
        debug("Built {!r}".format(config))
        return config

    @property
    def unlimited_failures(self):
        return self.max_failures == 0

    @property
    def buffer_size(self):
        """
        Size of the reusable write buffer: the block size, but never less
        than the default block size.
        """
        return max(self.block_size, BLOCK_SIZE_DEFAULT)
