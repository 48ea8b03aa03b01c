import errno
import logging
import os

import pytest
from unittest.mock import patch


# pytest seems to tweak logging such that our debug logs go to stderr, which
# is then hella spammy if one is using --capture=no.
# So, we explicitly turn default logging back down.
logging.basicConfig(level=logging.INFO)


@pytest.fixture
def reset_environ():
    """
    Resets `os.environ` to its prior state after the fixtured test finishes.
    """
    old_environ = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(old_environ)


@pytest.fixture
def workdir(tmp_path):
    """
    Run the test from within a fresh, empty temporary directory.
    """
    cwd = os.getcwd()
    os.chdir(tmp_path)
    yield tmp_path
    os.chdir(cwd)


@pytest.fixture
def no_sleep():
    with patch("timedwriter.writer.time.sleep") as sleep:
        yield sleep


@pytest.fixture
def failing_write():
    """
    Make every ``os.write`` in the writer fail with EIO.
    """
    error = OSError(errno.EIO, os.strerror(errno.EIO))
    with patch("timedwriter.writer.os.write", side_effect=error) as write:
        yield write
