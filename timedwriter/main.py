"""
timed-writer's 'binary' entrypoint.

Dogfoods the `program` module.
"""

from . import __version__, Program

program = Program(
    name="Timed-writer",
    binary="timed-writer",
    version=__version__,
)
