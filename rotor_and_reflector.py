# rotor_and_reflector.py
from __future__ import annotations

from typing import Set, Union

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError


class Rotor:
    """A wheel wired by *permutation*, seen through its current position.

    The base class neither moves nor reflects; subclasses switch those
    capabilities on.  ``position`` is the rotational offset of the wheel and
    ``ring_offset`` only moves where notches are recognised.
    """

    rotates: bool = False
    reflecting: bool = False

    def __init__(self, name: str, permutation: Permutation) -> None:
        if "(" in name or ")" in name:
            raise ConfigError(f"invalid rotor name: {name}")

        self.name = name
        self.permutation = permutation
        self.position = 0
        self.ring_offset = 0

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def size(self) -> int:
        return self.permutation.size

    def _to_index(self, value: Union[int, str]) -> int:
        if isinstance(value, str):
            return self.alphabet.index(value)
        return self.permutation.wrap(value)

    # ── ring & position ───────────────────────────────────────────
    def set_position(self, posn: Union[int, str]) -> None:
        self.position = self._to_index(posn)

    def set_ring(self, ring: Union[int, str]) -> None:
        self.ring_offset = self._to_index(ring)

    # ── notches & stepping ────────────────────────────────────────
    def notch_symbols(self) -> Set[str]:
        return set()

    def is_at_notch(self) -> bool:
        return self.alphabet.symbol(self.position) in self.notch_symbols()

    def advance(self) -> None:
        """Advance one position, if possible.  By default does nothing."""

    # ── signal paths ──────────────────────────────────────────────
    def convert_forward(self, p: int) -> int:
        perm = self.permutation
        return perm.wrap(perm.permute(p + self.position) - self.position)

    def convert_backward(self, e: int) -> int:
        perm = self.permutation
        return perm.wrap(perm.invert(e + self.position) - self.position)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} {self.name} "
            f"pos={self.position} ring={self.ring_offset}>"
        )


class MovingRotor(Rotor):
    rotates = True

    def __init__(self, name: str, permutation: Permutation, notches: str) -> None:
        super().__init__(name, permutation)
        for ch in notches:
            if ch not in self.alphabet:
                raise ConfigError(f"invalid notch {ch!r} on rotor {name}")
        self.notches = notches

    def notch_symbols(self) -> Set[str]:
        alpha = self.alphabet
        return {
            alpha.symbol(self.permutation.wrap(alpha.index(ch) - self.ring_offset))
            for ch in self.notches
        }

    def advance(self) -> None:
        self.position = self.permutation.wrap(self.position + 1)


class FixedRotor(Rotor):
    """A wheel that sits in a non-stepping slot (e.g. the M4's Beta)."""


class Reflector(Rotor):
    reflecting = True

    def __init__(self, name: str, permutation: Permutation) -> None:
        if not permutation.is_derangement():
            raise ConfigError(f"reflector {name} must not map a symbol to itself")
        super().__init__(name, permutation)
