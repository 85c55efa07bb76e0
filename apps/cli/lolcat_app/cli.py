"""Command-line entrypoint: option parsing, source opening, and exit status mapping."""

from __future__ import annotations

import argparse
import contextlib
import errno
import os
import re
import sys
import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from importlib import metadata
from typing import BinaryIO, TextIO

from lolcat_core import (
    ColorizerConfig,
    ConfigError,
    PerformanceController,
    Printer,
    UserConfig,
    choose_color_mode,
    duration_to_frames,
    initial_offset,
    load_config,
    random_seed_offset,
)
from lolcat_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from lolcat_render import ColorMode
from lolcat_stream import DEFAULT_CAPACITY, BrokenPipe, StreamIOError

DESCRIPTION = """\
Concatenate FILE(s), or standard input, to standard output.
With no FILE, or when FILE is -, read standard input."""

EPILOG = """\
Examples:
  lolcat f - g      Output f's contents, then stdin, then g's contents.
  lolcat            Copy standard input to standard output.
  fortune | lolcat  Display a rainbow cookie.

Report neo-lolcat bugs to <https://github.com/skyline69/neo-lolcat/issues>
neo-lolcat home page: <https://github.com/skyline69/neo-lolcat/>"""

# Short flags whose value is the rest of the bundle (``-S7``).
_VALUE_FLAGS = frozenset("pFSds")
_MISSING_VALUE = re.compile(r"^argument (\S+): expected one argument$")
_UNRECOGNIZED = re.compile(r"^unrecognized arguments: (\S+)")


class UsageError(Exception):
    pass


class RunStatus(str, Enum):
    SUCCESS = "success"
    REPORTED = "reported"
    BROKEN_PIPE = "broken_pipe"
    IO_ERROR = "io_error"


EXIT_CODES = {
    RunStatus.SUCCESS: 0,
    RunStatus.REPORTED: 1,
    RunStatus.BROKEN_PIPE: 0,
    RunStatus.IO_ERROR: 1,
}


@dataclass
class Invocation:
    config: ColorizerConfig
    files: list[str] = field(default_factory=list)
    show_help: bool = False
    show_version: bool = False


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        missing = _MISSING_VALUE.match(message)
        if missing:
            raise UsageError(f"{missing.group(1)} requires a value")
        unknown = _UNRECOGNIZED.match(message)
        if unknown:
            raise UsageError(f"unknown option '{unknown.group(1)}'")
        raise UsageError(message)


def _number(name: str):
    def parse(value: str) -> float:
        try:
            return float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid value for --{name}: '{value}'") from None

    return parse


def _seed(value: str) -> int:
    try:
        seed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid value for --seed: '{value}'") from None
    if seed < 0:
        raise argparse.ArgumentTypeError(f"invalid value for --seed: '{value}'")
    return seed


def _frames(value: str) -> int:
    seconds = _number("duration")(value)
    try:
        return duration_to_frames(seconds)
    except ConfigError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _installed_version() -> str:
    try:
        return metadata.version("neo-lolcat")
    except metadata.PackageNotFoundError:
        return "0.1.0"


def build_parser(defaults: UserConfig | None = None) -> argparse.ArgumentParser:
    defaults = defaults or UserConfig()
    parser = _Parser(
        prog="lolcat",
        usage="%(prog)s [OPTION]... [FILE]...",
        description=DESCRIPTION,
        epilog=EPILOG,
        add_help=False,
        allow_abbrev=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-p", "--spread", type=_number("spread"), default=defaults.rainbow.spread,
                        metavar="<f>", help="Rainbow spread (default: %(default)s)")
    parser.add_argument("-F", "--freq", type=_number("freq"), default=defaults.rainbow.freq,
                        metavar="<f>", help="Rainbow frequency (default: %(default)s)")
    parser.add_argument("-S", "--seed", type=_seed, default=defaults.rainbow.seed,
                        metavar="<i>", help="Rainbow seed, 0 = random (default: %(default)s)")
    parser.add_argument("-a", "--animate", action="store_true", help="Enable psychedelics")
    parser.add_argument("-d", "--duration", type=_frames, default=duration_to_frames(defaults.animation.duration),
                        metavar="<i>", help="Animation duration (default: %(default)s)")
    parser.add_argument("-s", "--speed", type=_number("speed"), default=defaults.animation.speed,
                        metavar="<f>", help="Animation speed (default: %(default)s)")
    parser.add_argument("-i", "--invert", action="store_true", default=defaults.output.invert,
                        help="Invert fg and bg")
    parser.add_argument("-t", "--truecolor", action="store_true", default=defaults.output.truecolor,
                        help="24-bit (truecolor)")
    parser.add_argument("-f", "--force", action="store_true", help="Force color even when stdout is not a tty")
    parser.add_argument("-D", "--debug", action="store_true", help="Print internal diagnostics")
    parser.add_argument("-v", "--version", action="store_true", help="Print version and exit")
    parser.add_argument("-h", "--help", action="store_true", help="Show this message")
    parser.add_argument("files", nargs="*", metavar="FILE")
    return parser


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def _bundle_sets_animate(arg: str) -> bool:
    if not arg.startswith("-") or arg.startswith("--") or len(arg) < 2:
        return False
    for ch in arg[1:]:
        if ch in _VALUE_FLAGS:
            return False
        if ch == "a":
            return True
    return False


def expand_animate_duration(argv: list[str]) -> list[str]:
    """Rewrite ``--animate N`` / ``-a N`` / ``--animate=N`` into an explicit duration.

    The argument after the animate flag is taken as a duration only when it
    parses as a number; anything else stays a file name.
    """
    out: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        i += 1
        if arg == "--":
            out.append(arg)
            out.extend(argv[i:])
            break
        if arg.startswith("--animate="):
            out.extend(["--animate", "--duration", arg.split("=", 1)[1]])
            continue
        out.append(arg)
        if (arg == "--animate" or _bundle_sets_animate(arg)) and i < len(argv) and _is_number(argv[i]):
            out.extend(["--duration", argv[i]])
            i += 1
    return out


def parse_invocation(
    argv: list[str],
    env: Mapping[str, str] | None = None,
    defaults: UserConfig | None = None,
) -> Invocation:
    env = os.environ if env is None else env
    args = expand_animate_duration(list(argv))
    trailing: list[str] = []
    if "--" in args:
        split = args.index("--")
        args, trailing = args[:split], args[split + 1 :]

    parser = build_parser(defaults)
    ns = parser.parse_intermixed_args(args)
    config = ColorizerConfig(
        spread=ns.spread,
        freq=ns.freq,
        seed=ns.seed,
        animate=ns.animate,
        duration=ns.duration,
        speed=ns.speed,
        invert=ns.invert,
        truecolor=ns.truecolor,
        force=ns.force,
        debug=ns.debug or "LOLCAT_DEBUG" in env,
    )
    try:
        config.validate()
    except ConfigError as exc:
        raise UsageError(str(exc)) from None
    return Invocation(
        config=config,
        files=list(ns.files) + trailing,
        show_help=ns.help,
        show_version=ns.version,
    )


def describe_error(path: str, err: OSError) -> str:
    if isinstance(err, FileNotFoundError):
        return f"lolcat: {path}: No such file or directory"
    if isinstance(err, PermissionError):
        return f"lolcat: {path}: Permission denied"
    if isinstance(err, IsADirectoryError) or err.errno == errno.EISDIR:
        return f"lolcat: {path}: Is a directory"
    if err.errno == errno.ENOTTY:
        return f"lolcat: {path}: Inappropriate ioctl for device"
    if err.errno == errno.ENXIO:
        return f"lolcat: {path}: Is not a regular file"
    return f"lolcat: {path}: {err.strerror or err}"


def _finalize_quietly(printer: Printer) -> None:
    try:
        printer.finalize()
    except (BrokenPipe, StreamIOError) as exc:
        get_logger().debug(f"cleanup after failed run also failed: {exc}")


def execute(
    config: ColorizerConfig,
    files: list[str],
    stdin: BinaryIO,
    stdout: BinaryIO,
    stderr: TextIO,
    env: Mapping[str, str] | None = None,
    buffer_size: int = DEFAULT_CAPACITY,
) -> RunStatus:
    log = get_logger()
    use_color = stdout.isatty() or config.force
    color_mode = choose_color_mode(config, env) if use_color else ColorMode.ANSI256
    log.debug(
        f"use_color={use_color}, mode={color_mode.value}, animate={config.animate}, "
        f"spread={config.spread}, freq={config.freq}"
    )
    perf = PerformanceController() if config.debug else None
    started = time.perf_counter()
    printer = Printer(config, stdout, use_color, color_mode, initial_offset(config.seed), buffer_size=buffer_size)

    status = RunStatus.SUCCESS
    try:
        for path in files or ["-"]:
            log.debug(f"processing source '{path}'")
            if path == "-":
                printer.render(stdin)
                continue
            try:
                handle = open(path, "rb")
            except OSError as exc:
                stderr.write(describe_error(path, exc) + "\n")
                status = RunStatus.REPORTED
                break
            with handle:
                printer.render(handle)
    except BrokenPipe:
        return RunStatus.BROKEN_PIPE
    except StreamIOError as exc:
        stderr.write(f"lolcat: {exc}\n")
        status = RunStatus.IO_ERROR
    except KeyboardInterrupt:
        _finalize_quietly(printer)
        raise

    if status is not RunStatus.SUCCESS:
        _finalize_quietly(printer)
        return status

    try:
        printer.finalize()
    except BrokenPipe:
        return RunStatus.BROKEN_PIPE
    except StreamIOError as exc:
        stderr.write(f"lolcat: {exc}\n")
        return RunStatus.IO_ERROR

    if perf is not None:
        summary = perf.sample(printer.stats, time.perf_counter() - started)
        log.debug(
            f"sources={summary.sources} glyphs={summary.glyphs} frames={summary.frames} "
            f"overruns={summary.overruns} "
            f"bytes={summary.bytes_written} writes={summary.writes} fps={summary.fps:.1f} "
            f"cpu={summary.cpu_percent:.1f}% rss={summary.rss_mb:.1f}MB"
        )
    return status


def print_help(
    parser: argparse.ArgumentParser,
    config: ColorizerConfig,
    stdout: BinaryIO,
    stderr: TextIO,
    env: Mapping[str, str] | None = None,
) -> RunStatus:
    help_cfg = replace(config, force=True, animate=False, spread=8.0, freq=0.3)
    printer = Printer(help_cfg, stdout, True, choose_color_mode(help_cfg, env), random_seed_offset(8192.0))
    try:
        printer.print_text(parser.format_help())
        printer.finalize()
    except BrokenPipe:
        return RunStatus.BROKEN_PIPE
    except StreamIOError as exc:
        stderr.write(f"lolcat: failed to render help: {exc}\n")
        return RunStatus.IO_ERROR
    return RunStatus.SUCCESS


def _silence_stdout() -> None:
    # Interpreter shutdown flushes stdout again; point it at the null device.
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        with contextlib.suppress(OSError, ValueError):
            os.dup2(devnull, sys.stdout.fileno())
    finally:
        os.close(devnull)


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    user = load_config()
    try:
        invocation = parse_invocation(args, os.environ, user)
    except UsageError as exc:
        print(f"lolcat: {exc}", file=sys.stderr)
        return 1

    configure_logging(
        debug=invocation.config.debug,
        file_enabled=user.logging.file_enabled,
        keep_files=user.logging.keep_log_files,
    )
    install_crash_hooks()

    stdout = sys.stdout.buffer
    if invocation.show_version:
        try:
            stdout.write(f"neo-lolcat {_installed_version()}\n".encode("utf-8"))
            stdout.flush()
        except BrokenPipeError:
            _silence_stdout()
        return 0

    if invocation.show_help:
        status = print_help(build_parser(user), invocation.config, stdout, sys.stderr, os.environ)
    else:
        status = execute(
            invocation.config,
            invocation.files,
            sys.stdin.buffer,
            stdout,
            sys.stderr,
            os.environ,
            buffer_size=user.output.buffer_size,
        )

    if status is RunStatus.BROKEN_PIPE:
        _silence_stdout()
    return EXIT_CODES[status]


if __name__ == "__main__":
    raise SystemExit(main())
