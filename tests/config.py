import pytest

from timedwriter import ConfigurationError, ParseError, RunConfig
from timedwriter.config import to_int


class RunConfig_:
    class defaults:
        def interval_is_five_seconds(self):
            assert RunConfig("f").interval == 5

        def iterations_is_the_maximum(self):
            assert RunConfig("f").iterations == 666

        def max_failures_is_five(self):
            assert RunConfig("f").max_failures == 5

        def block_size_is_zero(self):
            assert RunConfig("f").block_size == 0

        def no_lock(self):
            assert RunConfig("f").exclusive_lock is False

    class filename:
        def is_kept_verbatim(self):
            assert RunConfig("/mnt/my file.txt").filename == "/mnt/my file.txt"

        def is_required(self):
            with pytest.raises(ConfigurationError) as info:
                RunConfig("")
            assert str(info.value) == "Expecting one, and only one, FILENAME"

    class interval:
        @pytest.mark.parametrize("value", [1, "1", 3600, "3600", " 60 "])
        def accepts_values_within_bounds(self, value):
            assert RunConfig("f", interval=value).interval == int(value)

        @pytest.mark.parametrize(
            "value", [0, "0", 3601, "-1", "abc", "1.5", "6_0", "0x10"]
        )
        def rejects_everything_else(self, value):
            with pytest.raises(ConfigurationError) as info:
                RunConfig("f", interval=value)
            assert str(info.value) == "Invalid sleep time: {}".format(value)
            assert info.value.value == value

    class iterations:
        @pytest.mark.parametrize("value", [1, "12", 666])
        def accepts_values_within_bounds(self, value):
            assert RunConfig("f", iterations=value).iterations == int(value)

        @pytest.mark.parametrize(
            "value", [0, "667", "-3", "lots", "1_0", "٣", "５"]
        )
        def rejects_everything_else(self, value):
            with pytest.raises(ConfigurationError) as info:
                RunConfig("f", iterations=value)
            assert str(info.value) == "Invalid max iterations: {}".format(
                value
            )

    class max_failures:
        @pytest.mark.parametrize("value", [0, 1, "100"])
        def accepts_values_within_bounds(self, value):
            config = RunConfig("f", max_failures=value)
            assert config.max_failures == int(value)

        @pytest.mark.parametrize("value", ["-1", 101, "x"])
        def rejects_everything_else(self, value):
            with pytest.raises(ConfigurationError) as info:
                RunConfig("f", max_failures=value)
            expected = "Invalid max consecutive write failures: {}"
            assert str(info.value) == expected.format(value)

        def zero_means_unlimited(self):
            assert RunConfig("f", max_failures=0).unlimited_failures
            assert not RunConfig("f", max_failures=1).unlimited_failures

    class block_size:
        @pytest.mark.parametrize("value", [0, "1", 33554432])
        def accepts_values_within_bounds(self, value):
            config = RunConfig("f", block_size=value)
            assert config.block_size == int(value)

        @pytest.mark.parametrize("value", ["-1", 33554433, "1k"])
        def rejects_everything_else(self, value):
            with pytest.raises(ConfigurationError) as info:
                RunConfig("f", block_size=value)
            expected = "Invalid write block size: {}"
            assert str(info.value) == expected.format(value)

        def buffer_is_never_smaller_than_1024_bytes(self):
            assert RunConfig("f").buffer_size == 1024
            assert RunConfig("f", block_size=10).buffer_size == 1024
            assert RunConfig("f", block_size=4096).buffer_size == 4096

    class immutability:
        def attributes_cannot_be_reassigned(self):
            config = RunConfig("f")
            with pytest.raises(AttributeError):
                config.interval = 10

        def identical_input_builds_equal_configs(self):
            assert RunConfig("f", "2", "3") == RunConfig("f", 2, 3)

    def configuration_errors_are_parse_errors(self):
        assert issubclass(ConfigurationError, ParseError)


class to_int_:
    def rejects_booleans(self):
        with pytest.raises(ConfigurationError):
            to_int(True, 0, 10, "thing")

    def rejects_floats(self):
        with pytest.raises(ConfigurationError):
            to_int(2.5, 0, 10, "thing")

    def accepts_signed_and_padded_ascii_digits(self):
        assert to_int(" +7 ", 0, 10, "thing") == 7

    def rejects_None(self):
        with pytest.raises(ConfigurationError) as info:
            to_int(None, 0, 10, "thing")
        assert str(info.value) == "Invalid thing: None"

    def bounds_are_inclusive(self):
        assert to_int("0", 0, 10, "thing") == 0
        assert to_int("10", 0, 10, "thing") == 10
