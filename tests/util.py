import logging
from unittest.mock import patch

from timedwriter.util import LOG_FORMAT, enable_logging, log, plural


class util:
    class plural:
        def singular_for_one(self):
            assert plural(1, "write") == "1 write"

        def plural_otherwise(self):
            assert plural(0, "write") == "0 writes"
            assert plural(3, "write") == "3 writes"

    class logging_:
        def logger_is_namespaced(self):
            assert log.name == "timedwriter"

        @patch("timedwriter.util.logging.basicConfig")
        def enable_logging_turns_on_debug_level(self, basic_config):
            enable_logging()
            basic_config.assert_called_once_with(
                level=logging.DEBUG, format=LOG_FORMAT
            )
