# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from alphabet_and_permutation import Alphabet, Permutation
from errors import ConfigError
from rotor_and_reflector import Rotor

Trace = Callable[[str], None]


class Machine:
    """An Enigma-style machine with *num_rotors* slots and *pawls* pawls.

    Slot 0 holds the reflector and slot ``num_rotors - 1`` the fast rotor.
    The rightmost *pawls* slots hold moving rotors, the slots between them
    and the reflector hold non-moving ones.  *rotors* is the catalog of every
    wheel available for selection.  When *trace* is given it receives one
    line per converted symbol describing the signal path.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        rotors: Iterable[Rotor],
        trace: Optional[Trace] = None,
    ) -> None:
        if num_rotors < 2 or not 0 <= pawls < num_rotors:
            raise ConfigError("invalid machine: number of pawls or rotors")

        catalog: Dict[str, Rotor] = {}
        for rotor in rotors:
            if rotor.name in catalog:
                raise ConfigError(f"invalid machine: rotor {rotor.name} defined twice")
            catalog[rotor.name] = rotor
        if len(catalog) < num_rotors:
            raise ConfigError("invalid machine: too many slots for available rotors")

        self._alphabet = alphabet
        self._pawls = pawls
        self._catalog = catalog
        self._slots: List[Optional[Rotor]] = [None] * num_rotors
        self._plugboard = Permutation("", alphabet)
        self._trace = trace

    # ── accessors ───────────────────────────────────────────────

    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        return len(self._slots)

    @property
    def num_pawls(self) -> int:
        return self._pawls

    @property
    def available_rotors(self) -> Dict[str, Rotor]:
        return dict(self._catalog)

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    def rotor_at(self, k: int) -> Rotor:
        """Return the rotor in slot *k* (0 is the reflector)."""
        rotor = self._slots[k]
        if rotor is None:
            raise ConfigError("no rotors selected")
        return rotor

    @property
    def window(self) -> str:
        """Symbols currently showing on slots 1..num_rotors-1."""
        return "".join(
            self._alphabet.symbol(self.rotor_at(i).position)
            for i in range(1, self.num_rotors)
        )

    # ── setup ───────────────────────────────────────────────────

    def select_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots with the rotors called *names* (reflector first).

        Every selected rotor comes back at position 0 with ring offset 0.
        """
        if len(names) != self.num_rotors:
            raise ConfigError(f"expected {self.num_rotors} rotor names, got {len(names)}")

        first_moving = self.num_rotors - self._pawls
        chosen: List[Rotor] = []
        for i, name in enumerate(names):
            rotor = self._catalog.get(name)
            if rotor is None:
                raise ConfigError(f"unknown rotor {name}")
            if names.index(name) != i:
                raise ConfigError(f"rotor {name} selected more than once")

            if i == 0:
                if not rotor.reflecting:
                    raise ConfigError("rotor 0 must be a reflector")
            elif i < first_moving:
                if rotor.rotates or rotor.reflecting:
                    raise ConfigError(f"rotor {i} must be type NonMoving")
            elif not rotor.rotates:
                raise ConfigError(f"rotor {i} must be type Moving")
            chosen.append(rotor)

        for rotor in chosen:
            rotor.set_position(0)
            rotor.set_ring(0)
        self._slots = list(chosen)

    def set_positions(self, setting: str, ring_setting: Optional[str] = None) -> None:
        """Turn slots 1.. to *setting*, leftmost rotor first.

        With *ring_setting* the visible letters are read against the shifted
        rings.  Without it, ring offsets already stored on the rotors stay.
        """
        self._check_setting(setting, "rotor positions")
        if ring_setting is None:
            for i, posn in enumerate(setting, start=1):
                self.rotor_at(i).set_position(posn)
            return

        self._check_setting(ring_setting, "ring settings")
        alpha = self._alphabet
        adjusted = "".join(
            alpha.symbol((alpha.index(s) - alpha.index(r)) % alpha.size)
            for s, r in zip(setting, ring_setting)
        )
        self.set_positions(adjusted)
        for i, ring in enumerate(ring_setting, start=1):
            self.rotor_at(i).set_ring(ring)

    def _check_setting(self, setting: str, what: str) -> None:
        if len(setting) != self.num_rotors - 1:
            raise ConfigError(
                f"invalid number of {what}: expected {self.num_rotors - 1}, "
                f"got {len(setting)}"
            )
        for ch in setting:
            if ch not in self._alphabet:
                raise ConfigError(f"invalid {what}: character {ch!r} not in alphabet")

    def set_plugboard(self, plugboard: Permutation) -> None:
        self._plugboard = plugboard

    # ── stepping logic  ─────────────────────────────────────────

    def _advance_rotors(self) -> None:
        """Step the moving rotors for one key press.

        A rotor sitting at a notch carries the rotor on its left and steps
        itself as well, which gives the middle-rotor double step.
        """
        m = self.num_rotors
        slots = [self.rotor_at(i) for i in range(m)]
        advances = [False] * m
        for i in range(m - self._pawls + 1, m):
            if slots[i].is_at_notch():
                advances[i] = advances[i - 1] = True
        advances[m - 1] = True

        for i in range(m - self._pawls, m):
            if advances[i]:
                slots[i].advance()

    # ── encipher one symbol  ────────────────────────────────────

    def convert_symbol(self, c: int) -> int:
        """Advance the machine, then convert the index *c*."""
        self._advance_rotors()
        path = [self._plugboard.wrap(c)] if self._trace else None

        c = self._plugboard.permute(c)
        if path is not None:
            path.append(c)

        for i in range(self.num_rotors - 1, 0, -1):
            c = self._slots[i].convert_forward(c)
            if path is not None:
                path.append(c)

        for rotor in self._slots:
            c = rotor.convert_backward(c)
            if path is not None:
                path.append(c)

        c = self._plugboard.permute(c)
        if path is not None:
            path.append(c)
            route = " -> ".join(self._alphabet.symbol(p) for p in path)
            self._trace(f"[{self.window}] {route}")
        return c

    def convert_text(self, msg: str) -> str:
        """Convert *msg* symbol by symbol, moving the rotors as we go."""
        alpha = self._alphabet
        return "".join(
            alpha.symbol(self.convert_symbol(alpha.index(ch))) for ch in msg
        )

    def __repr__(self) -> str:
        names = [r.name if r else "-" for r in self._slots]
        return f"<Machine slots={names} pawls={self._pawls}>"
