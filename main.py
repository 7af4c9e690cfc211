# main.py
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple

from debug import COMPONENTS, Debug
from errors import ConfigError, EnigmaError
from machine import Machine
from suites import SUITES, build_machine
from utilities import (
    apply_settings,
    format_groups,
    is_settings_line,
    load_config,
    preprocess_message,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Config:
    """Runtime switches for the command-line driver."""

    verbose: bool = False           # trace every converted symbol
    components: Tuple[str, ...] = ()  # diagnostics switched on one by one
    block: int = 5                  # output group width
    log_to: Optional[Path] = None   # copy diagnostics into this file


# ────────────────────────────────────────────────────────────────────────
#  1. CipherSession – drives a machine over a stream of lines
# ────────────────────────────────────────────────────────────────────────


class CipherSession:
    """Apply settings lines and convert message lines, in input order."""

    def __init__(self, machine: Machine, cfg: Config, debug: Optional[Debug] = None) -> None:
        if cfg.block < 1:
            raise ConfigError(f"invalid block size {cfg.block}")
        self.machine = machine
        self.cfg = cfg
        self.debug = debug

    def _log(self, component: str, message: str) -> None:
        if self.debug is not None:
            self.debug.log(component, message)

    def process(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield one output line for every message line of *lines*."""
        configured = False
        for raw in lines:
            line = raw.rstrip("\r\n")
            if is_settings_line(line):
                apply_settings(self.machine, line)
                configured = True
                self._log("settings", f"{line.strip()} -> window {self.machine.window}")
                continue

            if not configured:
                if not line.strip():
                    continue
                raise ConfigError("invalid input: first line must indicate settings")

            converted = self.machine.convert_text(preprocess_message(line))
            self._log("output", f"{len(converted)} symbols converted")
            yield format_groups(converted, self.cfg.block)

        if not configured:
            raise ConfigError("invalid input: first line must indicate settings")

    def run(self, source: TextIO, sink: TextIO) -> None:
        for out in self.process(source):
            sink.write(out + "\n")


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="enigma",
        description="Encrypt or decrypt messages with a simulated rotor machine.",
    )
    p.add_argument("--verbose", action="store_true", help="Trace every converted symbol on stderr.")
    p.add_argument(
        "--trace",
        action="append",
        default=[],
        choices=COMPONENTS,
        metavar="COMPONENT",
        help=f"Log one diagnostic component ({', '.join(COMPONENTS)}); repeatable.",
    )
    p.add_argument("--log-file", metavar="FILE", type=Path, help="Also write diagnostics to FILE.")
    p.add_argument(
        "--suite",
        choices=sorted(SUITES),
        help="Use a built-in historical machine instead of a configuration file.",
    )
    p.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="CONFIG [INPUT [OUTPUT]], or INPUT [OUTPUT] with --suite. "
        "Standard input/output are used when omitted.",
    )
    args = p.parse_args(argv)

    limit = 2 if args.suite else 3
    if len(args.files) > limit or (not args.suite and not args.files):
        p.error("usage: enigma [--verbose] (CONFIG | --suite NAME) [INPUT [OUTPUT]]")
    return args


def _open(name: str, mode: str) -> TextIO:
    try:
        return open(name, mode, encoding="utf-8")
    except OSError:
        raise ConfigError(f"could not open {name}") from None


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = Config(verbose=args.verbose, components=tuple(args.trace), log_to=args.log_file)

    files = list(args.files)
    opened: List[TextIO] = []
    debug: Optional[Debug] = None
    try:
        debug = Debug(log_to=str(cfg.log_to) if cfg.log_to else None, verbose=cfg.verbose)
        debug.enable(*cfg.components)
        trace = debug.sink("machine") if debug.is_enabled("machine") else None

        if args.suite:
            machine = build_machine(args.suite, trace=trace)
            debug.log("config", f"built-in suite {args.suite}")
        else:
            config_name = files.pop(0)
            machine = load_config(config_name, trace=trace)
            debug.log("config", f"loaded {config_name}")
        debug.log("config", repr(machine))

        source = sys.stdin
        sink = sys.stdout
        if files:
            source = _open(files[0], "r")
            opened.append(source)
        if len(files) > 1:
            sink = _open(files[1], "w")
            opened.append(sink)

        CipherSession(machine, cfg, debug).run(source, sink)
    except EnigmaError as excp:
        sys.stdout.flush()
        print(f"Error: {excp}", file=sys.stderr)
        return 1
    finally:
        for handle in opened:
            handle.close()
        if debug is not None:
            debug.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
