import logging
import os


LOG_FORMAT = "%(name)s.%(module)s.%(funcName)s: %(message)s"


def enable_logging():
    logging.basicConfig(
        level=logging.DEBUG,
        format=LOG_FORMAT,
    )


# Allow from-the-start debugging (vs toggled during argv parsing) via shell
# env var.
if os.environ.get("TIMEDWRITER_DEBUG"):
    enable_logging()

# Add top level logger functions to global namespace. Meh.
log = logging.getLogger("timedwriter")
debug = log.debug


def plural(count, word):
    """
    Return ``"<count> <word>"``, pluralizing ``word`` unless ``count`` is 1.
    """
    return "{} {}{}".format(count, word, "" if count == 1 else "s")
