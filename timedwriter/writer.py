"""
The write loop: open, (optionally) lock, then write-measure-sleep until done.
"""

import fcntl
import os
import sys
import time
from collections import namedtuple

from .exceptions import LockError, OpenError, WriteFailure
from .util import debug, plural


#: Byte used to fill the write buffer past the iteration index text.
FILLER = b"\r"

#: Flags used when opening the target file. ``O_SYNC`` makes each write wait
#: for the storage, which is the latency we want to observe.
OPEN_FLAGS = os.O_WRONLY | os.O_CREAT | os.O_TRUNC | getattr(os, "O_SYNC", 0)
OPEN_MODE = 0o666

# Loop states.
RUNNING = "running"
SLEEPING = "sleeping"
COMPLETED = "completed"
FAILED = "failed"


class WriteBuffer(object):
    """
    Reusable byte buffer holding each iteration's payload.

    The buffer is allocated once, ``size`` bytes long and filled with
    `FILLER`. Every iteration overwrites its beginning with the iteration
    index rendered as ``"<index>\\n"``.
    """

    def __init__(self, size, block_size=0):
        if block_size > size:
            err = "Block size {} does not fit in a {}-byte buffer"
            raise ValueError(err.format(block_size, size))
        self.block_size = block_size
        self.data = bytearray(FILLER * size)

    def __len__(self):
        return len(self.data)

    def load(self, iteration):
        """
        Write ``iteration``'s text into the buffer & return the payload.

        :returns:
            A `memoryview` over the bytes to hand to ``write()``: just the
            index text when ``block_size`` is ``0``, otherwise the first
            ``block_size`` bytes of the buffer.
        """
        text = "{}\n".format(iteration).encode("ascii")
        if len(text) > len(self.data):
            err = "Iteration text {!r} overflows the {}-byte write buffer"
            raise ValueError(err.format(text, len(self.data)))
        self.data[: len(text)] = text
        size = self.block_size or len(text)
        return memoryview(self.data)[:size]


class Measurement(
    namedtuple(
        "Measurement", "iteration requested written wall user system error"
    )
):
    """
    Outcome & timing of a single ``write()`` call.

    ``written`` is ``None`` and ``error`` holds a `.WriteFailure` when the
    call failed; otherwise ``error`` is ``None``. Timing fields are in
    (fractional) seconds.
    """

    __slots__ = ()

    @property
    def failed(self):
        return self.error is not None

    @property
    def short(self):
        return not self.failed and self.written != self.requested


class Writer(object):
    """
    Writes a block to a file every so many seconds.

    Owns the target file descriptor, the `WriteBuffer` and the loop counters
    for a single run. Driven by `run`, which always closes the file (and thus
    drops any lock) before returning or raising.

    :param config: A `.RunConfig`.
    :param out: Stream for progress reports. Defaults to ``sys.stdout``.
    :param err: Stream for error reports. Defaults to ``sys.stderr``.
    """

    def __init__(self, config, out=None, err=None):
        self.config = config
        self.out = out
        self.err = err
        self.fd = None
        self.buffer = None
        self.iteration = 0
        self.failures = 0
        self.state = RUNNING

    # Streams are looked up at print time so that swapping sys.stdout and
    # friends (e.g. during testing) is honored.
    def say(self, *args, **kwargs):
        print(*args, file=self.out or sys.stdout, **kwargs)

    def complain(self, *args, **kwargs):
        print(*args, file=self.err or sys.stderr, **kwargs)

    def run(self):
        """
        Execute the entire write loop.

        :returns:
            The final loop state: `COMPLETED` once every iteration ran, or
            `FAILED` if the consecutive failure limit was reached.

        :raises:
            `.OpenError` or `.LockError` if the file couldn't be prepared.
        """
        self.print_settings()
        self.buffer = WriteBuffer(
            size=self.config.buffer_size, block_size=self.config.block_size
        )
        self.open()
        try:
            self.lock()
            while self.iteration < self.config.iterations:
                self.step()
                if self.state == FAILED:
                    break
            else:
                self.state = COMPLETED
        finally:
            self.close()
        debug("Loop finished in state {!r}".format(self.state))
        return self.state

    def print_settings(self):
        config = self.config
        self.say("Filename: {}".format(config.filename))
        lock = "on" if config.exclusive_lock else "off"
        self.say("Exclusive lock: {}".format(lock))
        self.say("Sleep after each write: {}".format(config.interval))
        self.say("Max iterations: {}".format(config.iterations))
        self.say("Max consecutive write fails: {}".format(config.max_failures))
        self.say("Write size: {}".format(config.block_size))

    def open(self):
        path = self.config.filename
        debug("Opening {!r} with flags {:#o}".format(path, OPEN_FLAGS))
        try:
            self.fd = os.open(path, OPEN_FLAGS, OPEN_MODE)
        except OSError as e:
            raise OpenError.from_oserror(path, e)

    def lock(self):
        if not self.config.exclusive_lock:
            return
        # Blocks until any other holder lets go.
        debug("Waiting for exclusive lock on fd {}".format(self.fd))
        try:
            fcntl.flock(self.fd, fcntl.LOCK_EX)
        except OSError as e:
            raise LockError.from_oserror(self.config.filename, e)
        debug("Got exclusive lock on fd {}".format(self.fd))

    def close(self):
        if self.fd is None:
            return
        debug("Closing fd {}".format(self.fd))
        os.close(self.fd)
        self.fd = None

    def step(self):
        """
        Perform one iteration: write, report, account, then maybe sleep.
        """
        payload = self.buffer.load(self.iteration)
        self.say(
            "\nWriting sequence {} ({} bytes)".format(
                self.iteration, len(payload)
            )
        )
        measurement = self.write(payload)
        self.account(measurement)
        if self.state == FAILED:
            return measurement
        self.report(measurement)
        self.iteration += 1
        if self.iteration < self.config.iterations:
            self.state = SLEEPING
            time.sleep(self.config.interval)
            self.state = RUNNING
        return measurement

    def write(self, payload):
        """
        Issue a single timed ``write()`` of ``payload``.

        :returns: A `Measurement`.
        """
        written, error = None, None
        wall_before = time.monotonic()
        times_before = os.times()
        try:
            written = os.write(self.fd, payload)
        except OSError as e:
            error = WriteFailure.from_oserror(e)
        times_after = os.times()
        wall_after = time.monotonic()
        return Measurement(
            iteration=self.iteration,
            requested=len(payload),
            written=written,
            wall=wall_after - wall_before,
            user=times_after.user - times_before.user,
            system=times_after.system - times_before.system,
            error=error,
        )

    def account(self, measurement):
        """
        Update the consecutive failure count based on ``measurement``.

        Sets `state` to `FAILED` once the configured limit is reached.
        """
        if not measurement.failed:
            # Short writes count as successes.
            self.failures = 0
            if measurement.short:
                self.say(
                    "write() returned {} instead of {}. Interrupted?!!".format(
                        measurement.written, measurement.requested
                    )
                )
            return
        self.complain(measurement.error)
        if self.config.unlimited_failures:
            return
        self.failures += 1
        streak = plural(self.failures, "write")
        debug("Failure streak is now {}".format(streak))
        if self.failures == self.config.max_failures:
            self.complain("Reached max failcount ... bye!")
            self.state = FAILED

    def report(self, measurement):
        self.say(
            "write() took approx {:.2f} seconds (user: {:.2f}; sys: {:.2f})".format( # noqa
                measurement.wall, measurement.user, measurement.system
            )
        )
