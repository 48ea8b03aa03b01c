import os
import sys
import time

import pytest
from pytest_relaxed import trap

from invoke import run

from timedwriter import __version__


@pytest.fixture(autouse=True)
def in_tmpdir(tmp_path):
    cwd = os.getcwd()
    os.chdir(str(tmp_path))
    yield tmp_path
    os.chdir(cwd)


class Main:
    class basics:
        @trap
        def help_output(self, in_tmpdir):
            result = run("timed-writer -h", hide=True)
            assert result.stdout.startswith("Usage: timed-writer ")
            assert result.exited == 0
            assert os.listdir(str(in_tmpdir)) == []

        @trap
        def invocable_via_python_dash_m(self):
            cmd = "{} -m timedwriter -h".format(sys.executable)
            result = run(cmd, hide=True)
            assert "Writes a line to FILENAME" in result.stdout

        @trap
        def writes_index_lines(self, in_tmpdir):
            result = run("timed-writer -s 1 -c 3 -b 0 file.txt", hide=True)
            assert result.exited == 0
            assert result.stdout.count("\nWriting sequence ") == 3
            assert (in_tmpdir / "file.txt").read_text() == "0\n1\n2\n"

        @trap
        def writes_fixed_blocks(self, in_tmpdir):
            run("timed-writer -s 1 -c 2 -b 4096 blocks.bin", hide=True)
            assert (in_tmpdir / "blocks.bin").stat().st_size == 8192

        @trap
        def two_filenames_exit_nonzero(self, in_tmpdir):
            result = run("timed-writer a.txt b.txt", warn=True, hide=True)
            assert result.exited == 1
            assert not result.stdout
            assert result.stderr == "Expecting one, and only one, FILENAME\n"
            assert os.listdir(str(in_tmpdir)) == []

        @trap
        def bad_value_exits_nonzero(self):
            result = run("timed-writer -s 0 f.txt", warn=True, hide=True)
            assert result.exited == 1
            assert result.stderr == "Invalid sleep time: 0\n"

        @trap
        def version_output(self, in_tmpdir):
            result = run("timed-writer -V", hide=True)
            assert result.stdout == "Timed-writer {}\n".format(__version__)
            assert os.listdir(str(in_tmpdir)) == []

        @trap
        def options_after_filename(self, in_tmpdir):
            result = run("timed-writer late.txt -c 1 -s 1", hide=True)
            assert result.exited == 0
            assert (in_tmpdir / "late.txt").read_text() == "0\n"

        @trap
        def missing_value_exits_nonzero(self):
            result = run("timed-writer f.txt -c", warn=True, hide=True)
            assert result.exited == 1
            assert result.stderr == "Option -c requires a value, try -h\n"

        @trap
        def unopenable_file_exits_nonzero(self):
            result = run("timed-writer nope/f.txt", warn=True, hide=True)
            assert result.exited == 1
            assert result.stderr.startswith("Unable to open nope/f.txt")

    class locking:
        @trap
        def second_locker_waits_for_the_first(self):
            cmd = "timed-writer -l -c 2 -s 1 shared.txt"
            first = run(cmd, asynchronous=True, hide=True)
            # Give the first writer time to grab the lock.
            time.sleep(0.5)
            start = time.time()
            second = run(cmd, hide=True)
            waited = time.time() - start
            assert first.join().exited == 0
            assert second.exited == 0
            # First holds the lock for its ~1s sleep; second runs 2 writes
            # with a 1s sleep of its own on top of that wait.
            assert waited >= 1.3
