# suites.py
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError
from machine import Machine, Trace
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

Alpha26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# ── Wheel database ────────────────────────────────────────────────
# name → (kind, wiring, notches); kind is M (moving), N (non-moving), R

WHEELS: Dict[str, Tuple[str, str, str]] = {
    "I":      ("M", "EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II":     ("M", "AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III":    ("M", "BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV":     ("M", "ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V":      ("M", "VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    "VI":     ("M", "JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    "VII":    ("M", "NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
    "VIII":   ("M", "FKQHTLXOCBJSPDZRAMEWNIUYGV", "ZM"),
    "Beta":   ("N", "LEYJVCNIXWPBQMDRTAKZGFUHOS", ""),
    "Gamma":  ("N", "FSOKANUERHMBTIYCWLQPZXVGJD", ""),
    "A":      ("R", "EJMZALYXVBWFCRQUONTSPIKHGD", ""),
    "B":      ("R", "YRUHQSLDPXNGOKMIEBFZCWVJAT", ""),
    "C":      ("R", "FVPJIAOYEDRZXWGCTKUQSBNMHL", ""),
    "B-thin": ("R", "ENKQAUYWJICOPBLMDXZVFTHRGS", ""),
    "C-thin": ("R", "RDOBJNTKVEHMLFCWZAXGYIPSUQ", ""),
}

# ── Machines ──────────────────────────────────────────────────────

SUITES: Dict[str, Dict] = {
    "enigma-i": {
        "alphabet": Alpha26,
        "rotors": 4,
        "pawls": 3,
        "wheels": ["I", "II", "III", "IV", "V", "A", "B", "C"],
    },
    "m3": {
        "alphabet": Alpha26,
        "rotors": 4,
        "pawls": 3,
        "wheels": ["I", "II", "III", "IV", "V", "VI", "VII", "VIII", "B", "C"],
    },
    "m4": {
        "alphabet": Alpha26,
        "rotors": 5,
        "pawls": 3,
        "wheels": [
            "I", "II", "III", "IV", "V", "VI", "VII", "VIII",
            "Beta", "Gamma", "B-thin", "C-thin",
        ],
    },
}


def make_wheel(name: str, alphabet: Alphabet) -> Rotor:
    """Return a fresh rotor object for the historical wheel *name*."""
    try:
        kind, wiring, notches = WHEELS[name]
    except KeyError:
        raise ConfigError(f"unknown wheel {name}") from None

    perm = Permutation.from_wiring(wiring, alphabet)
    if kind == "M":
        return MovingRotor(name, perm, notches)
    if kind == "N":
        return FixedRotor(name, perm)
    return Reflector(name, perm)


def build_catalog(suite: str) -> Tuple[Alphabet, List[Rotor]]:
    cfg = _suite(suite)
    alphabet = Alphabet(cfg["alphabet"])
    return alphabet, [make_wheel(name, alphabet) for name in cfg["wheels"]]


def build_machine(suite: str, trace: Optional[Trace] = None) -> Machine:
    """Build an unconfigured machine holding the wheels of *suite*."""
    cfg = _suite(suite)
    alphabet, wheels = build_catalog(suite)
    return Machine(alphabet, cfg["rotors"], cfg["pawls"], wheels, trace=trace)


def _suite(suite: str) -> Dict:
    try:
        return SUITES[suite.lower()]
    except KeyError:
        raise ConfigError(
            f"Unknown suite '{suite}'. Expected one of {list(SUITES)}"
        ) from None
