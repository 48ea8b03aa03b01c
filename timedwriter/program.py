import os
import sys
import textwrap

from invoke.exceptions import ParseError as InvokeParseError
from invoke.parser import Argument, Parser, ParserContext
from invoke.terminals import pty_size

from .config import (
    BLOCK_SIZE_MAX,
    FAILURE_DEFAULT,
    FAILURE_MAX,
    INTERVAL_DEFAULT,
    INTERVAL_MAX,
    INTERVAL_MIN,
    ITERATION_MAX,
    RunConfig,
)
from .exceptions import Exit, ParseError, SetupError
from .util import debug, enable_logging
from .writer import FAILED, Writer


class Program(object):
    """
    Manages top-level CLI invocation, typically via ``setup.py`` entrypoints.

    Parses ``argv`` into a `.RunConfig`, hands it to a `.Writer` and turns the
    outcome into an exit status.
    """

    def core_args(self):
        """
        Return the program's `.Argument` objects, as a list.
        """
        # NOTE: numeric flags are kept as strings here; RunConfig does the
        # converting so that errors can quote exactly what the user typed.
        return [
            Argument(
                names=("sleep", "s"),
                help="Seconds to sleep after each write.",
            ),
            Argument(
                names=("count", "c"),
                help="Maximum number of writes.",
            ),
            Argument(
                names=("max-failures", "f"),
                help="Maximum consecutive write() failures (0: no limit).",
            ),
            Argument(
                names=("block-size", "b"),
                help="Bytes per write() (0: write the iteration number).",
            ),
            Argument(
                names=("lock", "l"),
                kind=bool,
                default=False,
                help="Hold an exclusive lock on FILENAME while writing.",
            ),
            Argument(
                names=("debug", "d"),
                kind=bool,
                default=False,
                help="Enable debug output.",
            ),
            Argument(
                names=("help", "h"),
                kind=bool,
                default=False,
                help="Show this help and exit.",
            ),
            Argument(
                names=("version", "V"),
                kind=bool,
                default=False,
                help="Show version and exit.",
            ),
        ]

    # Other class-level global variables a subclass might override sometime
    # maybe?
    leading_indent_width = 8
    leading_indent = " " * leading_indent_width
    col_padding = 3

    def __init__(
        self, version=None, name=None, binary=None, writer_class=None
    ):
        """
        Create a new, parameterized `.Program` instance.

        :param str version:
            The program's version, e.g. ``"0.1.0"``. Defaults to ``"unknown"``.

        :param str name:
            The program's name. If ``None`` (default), is a capitalized
            version of the first word in the ``argv`` handed to `.run`.

        :param str binary:
            The binary name as displayed in ``--help`` output. If ``None``
            (default), uses the first word in ``argv`` verbatim.

        :param writer_class:
            The `.Writer` subclass to use for the actual run. Defaults to
            `.Writer`.
        """
        self.version = "unknown" if version is None else version
        self._name = name
        self._binary = binary
        self.argv = None
        self.writer_class = writer_class or Writer

    def run(self, argv=None, exit=True):
        """
        Execute main CLI logic, based on ``argv``.

        :param argv:
            The arguments to execute against. May be ``None``, a list of
            strings, or a string. See `.normalize_argv` for details.

        :param bool exit:
            When ``False`` (default: ``True``), will ignore `.ParseError`,
            `.SetupError` and `.Exit` exceptions, which otherwise trigger
            calls to `sys.exit`.

            .. note::
                This is mostly a concession to testing.
        """
        try:
            self.parse_core(argv)
            self.create_config()
            self.execute()
        except (ParseError, SetupError, Exit) as e:
            debug("Received a possibly-skippable exception: {!r}".format(e))
            # Print error messages so the user sees what went wrong without a
            # messy traceback.
            if not isinstance(e, Exit):
                print(e, file=sys.stderr)
            # Terminate execution unless we were told not to.
            if exit:
                sys.exit(e.code if isinstance(e, Exit) else 1)
            else:
                debug("Invoked as run(..., exit=False), ignoring exception")
        except KeyboardInterrupt:
            sys.exit(1)  # Same behavior as Python itself outside of REPL

    def parse_core(self, argv):
        debug("argv given to Program.run: {!r}".format(argv))
        self.normalize_argv(argv)
        self.parse_core_args()

        # Enable debugging from here on out, if debug flag was given.
        # (Prior to this point, debugging requires setting TIMEDWRITER_DEBUG).
        if self.args.debug.value:
            enable_logging()

        # Print version & exit if necessary
        if self.args.version.value:
            debug("Saw --version, printing version & exiting")
            self.print_version()
            raise Exit

        # Help short-circuits everything else, including value validation.
        if self.args.help.value:
            debug("Saw --help, printing help & exiting")
            self.print_help()
            raise Exit

        if len(self.positionals) != 1:
            raise ParseError(
                "Expecting one, and only one, FILENAME",
                value=self.positionals,
            )
        self.filename = self.positionals[0]

    def parse_core_args(self):
        """
        Split ``argv`` into flags and positional tokens.

        Flags may appear before, between or after positional tokens; anything
        following a ``--`` is positional no matter what it looks like.

        Sets ``self.core`` to the `.ParseResult` of the final parsing pass
        (whose context holds the values of every flag seen) and
        ``self.positionals`` to the list of non-flag tokens, in order.
        """
        debug("Parsing initial context (core args)")
        tokens = list(self.argv[1:])
        remainder = []
        if "--" in tokens:
            ddash = tokens.index("--")
            tokens, remainder = tokens[:ddash], tokens[ddash + 1 :]
            debug("Remainder after '--': {!r}".format(remainder))
        context = self.initial_context
        self.check_flag_values(context, tokens)
        self.positionals = []
        while True:
            parser = Parser(initial=context, ignore_unknown=True)
            try:
                self.core = parser.parse_argv(tokens)
            except InvokeParseError as e:
                debug("Parser gave up: {}".format(e))
                raise ParseError("Command line gibberish, try -h")
            # Carry flag values seen so far into the next pass.
            context = self.core[0]
            leftovers = self.core.unparsed
            if not leftovers:
                break
            head, tokens = leftovers[0], leftovers[1:]
            # A lone '-' is a (weird) filename, anything else is a bad flag.
            if head.startswith("-") and head != "-":
                raise ParseError("Command line gibberish, try -h", value=head)
            self.positionals.append(head)
        self.positionals.extend(remainder)
        msg = "Core-args parse result: {!r} & positionals: {!r}"
        debug(msg.format(self.core, self.positionals))

    def check_flag_values(self, context, tokens):
        """
        Ensure every value-taking flag in ``tokens`` is followed by a value.

        A following token that is itself one of our flags does not count.

        :raises: `.ParseError` naming the flag as typed by the user.
        """
        flags = context.flags
        for index, token in enumerate(tokens):
            if token not in flags or not flags[token].takes_value:
                continue
            following = tokens[index + 1 : index + 2]
            if not following or following[0] in flags:
                raise ParseError(
                    "Option {} requires a value, try -h".format(token),
                    value=token,
                )

    def create_config(self):
        """
        Build the validated `.RunConfig` from the parse results.

        :returns: ``None``; sets ``self.config`` instead.
        """
        args = self.args
        # Flags not given on the command line fall through to RunConfig's own
        # defaults.
        given = {}
        for flag, field in (
            ("sleep", "interval"),
            ("count", "iterations"),
            ("max-failures", "max_failures"),
            ("block-size", "block_size"),
        ):
            if args[flag].value is not None:
                given[field] = args[flag].value
        self.config = RunConfig(
            self.filename, exclusive_lock=args.lock.value, **given
        )

    def execute(self):
        """
        Hand the config to a `.Writer` and run it to completion.

        :raises: `.Exit` (with code 1) if the writer gave up on failures.
        """
        writer = self.writer_class(self.config)
        if writer.run() == FAILED:
            raise Exit(1)

    def normalize_argv(self, argv):
        """
        Massages ``argv`` into a useful list of strings.

        **If None** (the default), uses `sys.argv`.

        **If a non-string iterable**, uses that in place of `sys.argv`.

        **If a string**, performs a `str.split` and then executes with the
        result. (This is mostly a convenience; when in doubt, use a list.)

        Sets ``self.argv`` to the result.
        """
        if argv is None:
            argv = sys.argv
            debug("argv was None; using sys.argv: {!r}".format(argv))
        elif isinstance(argv, str):
            argv = argv.split()
            debug("argv was string-like; splitting: {!r}".format(argv))
        self.argv = argv

    @property
    def name(self):
        """
        Derive program's human-readable name based on `.binary`.
        """
        return self._name or self.binary.capitalize()

    @property
    def binary(self):
        """
        Derive program's help-oriented binary name from init args & argv.
        """
        return self._binary or os.path.basename(self.argv[0])

    @property
    def args(self):
        """
        Obtain core program args from ``self.core`` parse result.
        """
        return self.core[0].args

    @property
    def initial_context(self):
        return ParserContext(args=self.core_args())

    def print_version(self):
        print("{} {}".format(self.name, self.version or "unknown"))

    def print_help(self):
        binary = self.binary
        print(
            "Usage: {} [-s SLEEP ] [-c MAX_ITER] [-f MAX_FAIL] [-b BLOCK_SIZE] [-l] FILENAME".format( # noqa
                binary
            )
        )
        print("       {} -h | -V".format(binary))
        print("")
        print("Writes a line to FILENAME with SLEEP seconds between writes")
        print("")
        self.print_columns(
            [
                (
                    "-s SLEEP",
                    "seconds sleep after each iteration (default: {}; bounds: [{}, {}])".format( # noqa
                        INTERVAL_DEFAULT, INTERVAL_MIN, INTERVAL_MAX
                    ),
                ),
                (
                    "-c MAX_ITER",
                    "limit iterations to MAX_ITER (def: {})".format(
                        ITERATION_MAX
                    ),
                ),
                (
                    "-f MAX_FAIL",
                    "limit consecutive write() failures to MAX_FAIL <= {} (def: {}; inf: 0)".format( # noqa
                        FAILURE_MAX, FAILURE_DEFAULT
                    ),
                ),
                (
                    "-b BLOCK_SIZE",
                    "set write() size to BLOCK_SIZE <= {} (def: 0); 0 writes iteration's \"%d\\n\"".format( # noqa
                        BLOCK_SIZE_MAX
                    ),
                ),
                ("-l", "place LOCK_EX on FILENAME"),
                ("-d", "enable debug output"),
                ("-h", "show this help and exit"),
                ("-V", "show version and exit"),
            ]
        )
        print("Example: {} /mnt/myfile.txt".format(binary))
        print("         {} -s 5 -c 100 -l /mnt/myexclusive.txt".format(binary))
        print(
            "         {} -s 1 -c 10 -f 2 -b $((1024*1024)) -l /mnt/megwrite.txt".format( # noqa
                binary
            )
        )
        print("")

    def print_columns(self, tuples):
        """
        Print tabbed columns from (name, help) ``tuples``.
        """
        # Calculate column sizes: don't wrap flag specs, give what's left over
        # to the descriptions.
        name_width = max(len(x[0]) for x in tuples)
        desc_width = (
            pty_size()[0]
            - name_width
            - self.leading_indent_width
            - self.col_padding
            - 1
        )
        wrapper = textwrap.TextWrapper(width=max(desc_width, 20))
        for name, help_str in tuples:
            # Wrap descriptions/help text
            help_chunks = wrapper.wrap(help_str)
            # Print flag spec + padding
            name_padding = name_width - len(name)
            spec = "".join(
                (
                    self.leading_indent,
                    name,
                    name_padding * " ",
                    self.col_padding * " ",
                )
            )
            # Print help text as needed
            if help_chunks:
                print(spec + help_chunks[0])
                for chunk in help_chunks[1:]:
                    print((" " * len(spec)) + chunk)
            else:
                print(spec.rstrip())
        print("")
