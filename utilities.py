# utilities.py
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError
from machine import Machine, Trace
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_cycle_token_re = re.compile(r"^\(.+\)$")
_int_re = re.compile(r"^[+-]?\d+$")

JSON_REQUIRED = {"alphabet", "rotors", "pawls", "catalog"}


def _is_cycle_token(token: str) -> bool:
    return bool(_cycle_token_re.match(token))


# ────────────────────────────────────────────────────────────────────────
#  1. Machine configuration (text format)
# ────────────────────────────────────────────────────────────────────────


class _Tokens:
    """Whitespace token stream over a configuration text."""

    def __init__(self, text: str) -> None:
        self._tokens = text.split()
        self._pos = 0

    def has_next(self) -> bool:
        return self._pos < len(self._tokens)

    def peek(self) -> str | None:
        return self._tokens[self._pos] if self.has_next() else None

    def next(self, error: str) -> str:
        if not self.has_next():
            raise ConfigError(error)
        token = self._tokens[self._pos]
        self._pos += 1
        return token


def make_rotor(name: str, kind: str, cycles: str, alphabet: Alphabet) -> Rotor:
    """Build one catalog entry; *kind* is ``M<notches>``, ``N`` or ``R``."""
    perm = Permutation(cycles, alphabet)
    if kind.startswith("M"):
        return MovingRotor(name, perm, kind[1:])
    if kind.startswith("N"):
        return FixedRotor(name, perm)
    if kind.startswith("R"):
        return Reflector(name, perm)
    raise ConfigError(f"bad rotor description: unknown type {kind!r} for {name}")


def _read_int(tokens: _Tokens, what: str) -> int:
    token = tokens.next("configuration file truncated")
    if not _int_re.match(token):
        raise ConfigError(f"invalid config: {what} must be int")
    return int(token)


def _read_rotor(tokens: _Tokens, alphabet: Alphabet) -> Rotor:
    name = tokens.next("bad rotor description")
    kind = tokens.next(f"bad rotor description: {name} has no type")

    cycles: List[str] = []
    while tokens.has_next() and _is_cycle_token(tokens.peek()):
        cycles.append(tokens.next("bad rotor description"))
    return make_rotor(name, kind, " ".join(cycles), alphabet)


def read_config(text: str, trace: Optional[Trace] = None) -> Machine:
    """Return a machine configured from a configuration file's contents.

    The file holds the alphabet, the number of rotor slots, the number of
    pawls and then one ``name type (cycle)...`` description per rotor.
    """
    tokens = _Tokens(text)
    alphabet = Alphabet(tokens.next("configuration file truncated"))
    num_rotors = _read_int(tokens, "numRotors")
    pawls = _read_int(tokens, "numPawls")

    rotors: List[Rotor] = []
    while tokens.has_next():
        rotors.append(_read_rotor(tokens, alphabet))
    return Machine(alphabet, num_rotors, pawls, rotors, trace=trace)


# ────────────────────────────────────────────────────────────────────────
#  2. Machine configuration (JSON)
# ────────────────────────────────────────────────────────────────────────


def machine_from_dict(data: Dict, trace: Optional[Trace] = None) -> Machine:
    missing = JSON_REQUIRED - data.keys()
    if missing:
        raise ConfigError(f"Missing keys in config: {', '.join(sorted(missing))}")
    if not isinstance(data["alphabet"], str):
        raise ConfigError("invalid config: alphabet must be a string")
    if not isinstance(data["catalog"], list):
        raise ConfigError("invalid config: catalog must be a list of rotors")

    alphabet = Alphabet(data["alphabet"])
    rotors: List[Rotor] = []
    for entry in data["catalog"]:
        try:
            rotors.append(
                make_rotor(entry["name"], entry["type"], entry.get("cycles", ""), alphabet)
            )
        except (KeyError, TypeError, AttributeError):
            raise ConfigError(f"bad rotor description: {entry!r}") from None

    try:
        num_rotors, pawls = int(data["rotors"]), int(data["pawls"])
    except (TypeError, ValueError):
        raise ConfigError("invalid config: rotors and pawls must be int") from None
    return Machine(alphabet, num_rotors, pawls, rotors, trace=trace)


def load_config(path: str | Path, trace: Optional[Trace] = None) -> Machine:
    """Read *path* as JSON when it ends in ``.json``, else as text."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        raise ConfigError(f"could not open {path}") from None

    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"invalid JSON config {path}: {exc}") from None
        if not isinstance(data, dict):
            raise ConfigError(f"invalid JSON config {path}: expected an object")
        return machine_from_dict(data, trace=trace)
    return read_config(text, trace=trace)


# ────────────────────────────────────────────────────────────────────────
#  3. Settings lines
# ────────────────────────────────────────────────────────────────────────


def is_settings_line(line: str) -> bool:
    return line.lstrip().startswith("*")


def apply_settings(machine: Machine, line: str) -> None:
    """Set *machine* up from a settings line.

    ``* B Beta III IV I AXLE (HQ) (EX)`` selects the rotors (reflector
    first), turns them to AXLE and wires the plugboard.  A second string
    before the cycles, e.g. ``* B III II I AAA BCD``, is the ring setting.
    """
    tokens = line.split()
    m = machine.num_rotors
    if not tokens or tokens[0] != "*":
        raise ConfigError("invalid settings line: must begin with *")
    if len(tokens) < m + 2:
        raise ConfigError(f"invalid settings: requires {m + 2} arguments")

    machine.select_rotors(tokens[1 : m + 1])
    setting = tokens[m + 1]
    rest = tokens[m + 2 :]

    if rest and not rest[0].startswith("("):
        machine.set_positions(setting, rest.pop(0))
    else:
        machine.set_positions(setting)

    for token in rest:
        if not token.startswith("("):
            raise ConfigError(f"invalid settings: unexpected {token!r}")
    machine.set_plugboard(Permutation(" ".join(rest), machine.alphabet))


# ────────────────────────────────────────────────────────────────────────
#  4. Text helpers
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str) -> str:
    """Drop the whitespace an operator types between groups."""
    return "".join(msg.split())


def format_groups(msg: str, block: int = 5) -> str:
    """Split *msg* into space-separated groups of *block* symbols."""
    return " ".join(_chunks(msg, block))


def _chunks(msg: str, block: int) -> Iterator[str]:
    for i in range(0, len(msg), block):
        yield msg[i : i + block]


__all__ = [
    "apply_settings",
    "format_groups",
    "is_settings_line",
    "load_config",
    "machine_from_dict",
    "make_rotor",
    "preprocess_message",
    "read_config",
]
