__all__ = (
    "COMPLETED",
    "ConfigurationError",
    "Exit",
    "FAILED",
    "LockError",
    "Measurement",
    "OpenError",
    "ParseError",
    "Program",
    "RunConfig",
    "SetupError",
    "WriteBuffer",
    "WriteFailure",
    "Writer",
    "__version__",
    "__version_info__",
)


from ._version import __version__, __version_info__
from .config import RunConfig
from .exceptions import (
    ConfigurationError,
    Exit,
    LockError,
    OpenError,
    ParseError,
    SetupError,
    WriteFailure,
)
from .program import Program
from .writer import COMPLETED, FAILED, Measurement, WriteBuffer, Writer
