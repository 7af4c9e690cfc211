# alphabet_and_permutation.py
from __future__ import annotations

import re
from typing import Iterator, Tuple, Union, overload

from errors import AlphabetLookupError, ConfigError

_CYCLE_DELIMITERS = "()"
_cycles_re = re.compile(r"(?:\([^()]*\))*")
_group_re = re.compile(r"\(([^()]*)\)")


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    def __init__(self, symbols: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ") -> None:
        if not symbols:
            raise ConfigError("invalid alphabet: no symbols")

        self.symbols: str = symbols
        self.symbol_to_index: dict[str, int] = {}

        for i, ch in enumerate(symbols):
            if ch in _CYCLE_DELIMITERS or ch.isspace():
                raise ConfigError(f"invalid alphabet: reserved character {ch!r}")
            if ch in self.symbol_to_index:
                raise ConfigError(f"invalid alphabet: repeated character {ch!r}")
            self.symbol_to_index[ch] = i

    @property
    def size(self) -> int:
        return len(self.symbols)

    def contains(self, symbol: str) -> bool:
        return symbol in self.symbol_to_index

    # symbol → integer signal
    def index(self, symbol: str) -> int:
        try:
            return self.symbol_to_index[symbol]
        except KeyError:
            raise AlphabetLookupError(
                f"character {symbol!r} not in alphabet"
            ) from None

    # integer signal → symbol
    def symbol(self, index: int) -> str:
        if not (0 <= index < self.size):
            hi = self.size - 1
            raise AlphabetLookupError(f"index {index} out of range 0-{hi}")
        return self.symbols[index]

    # ── niceties ──────────────────────────────────────────────────
    def __len__(self) -> int:
        return self.size

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.symbol_to_index

    def __iter__(self) -> Iterator[str]:
        return iter(self.symbols)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alphabet) and other.symbols == self.symbols

    def __hash__(self) -> int:
        return hash(self.symbols)

    def __str__(self) -> str:
        return self.symbols

    def __repr__(self) -> str:
        return f"<Alphabet {self.symbols!r}>"


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    """A permutation of an alphabet written in cycle notation.

    ``"(ABC) (DE)"`` sends A to B, B to C, C to A and swaps D and E.
    Symbols outside every cycle map to themselves, so ``""`` is the
    identity.  Whitespace in the text is ignored.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        self.alphabet = alphabet
        self.text = cycles

        compact = "".join(cycles.split())
        if not _cycles_re.fullmatch(compact):
            raise ConfigError(f"invalid cycle sequence {cycles!r}")

        seen: set[str] = set()
        parsed: list[str] = []
        for cycle in _group_re.findall(compact):
            for ch in cycle:
                if ch not in alphabet:
                    raise ConfigError(
                        f"invalid cycle sequence {cycles!r}: "
                        f"{ch!r} not in alphabet"
                    )
                if ch in seen:
                    raise ConfigError(
                        f"invalid cycle sequence {cycles!r}: "
                        f"{ch!r} appears more than once"
                    )
                seen.add(ch)
            if cycle:
                parsed.append(cycle)
        self._cycles: Tuple[str, ...] = tuple(parsed)

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string where ``wiring[i]`` is the image of
        ``alphabet.symbol(i)``."""
        if sorted(wiring) != sorted(alphabet.symbols):
            raise ConfigError("wiring must be a permutation of alphabet")

        seen: set[str] = set()
        groups: list[str] = []
        for start in alphabet:
            if start in seen:
                continue
            cycle = []
            ch = start
            while ch not in seen:
                seen.add(ch)
                cycle.append(ch)
                ch = wiring[alphabet.index(ch)]
            if len(cycle) > 1:
                groups.append("(" + "".join(cycle) + ")")
        return cls(" ".join(groups), alphabet)

    # ── basic facts ───────────────────────────────────────────────
    @property
    def cycles(self) -> Tuple[str, ...]:
        return self._cycles

    @property
    def size(self) -> int:
        return self.alphabet.size

    @property
    def wiring(self) -> str:
        return "".join(self.permute(ch) for ch in self.alphabet)

    def wrap(self, p: int) -> int:
        return p % self.size

    # ── application ───────────────────────────────────────────────
    @overload
    def permute(self, p: int) -> int: ...

    @overload
    def permute(self, p: str) -> str: ...

    def permute(self, p: Union[int, str]) -> Union[int, str]:
        if isinstance(p, str):
            return self.alphabet.symbol(self.permute(self.alphabet.index(p)))
        return self._shift(p, 1)

    @overload
    def invert(self, c: int) -> int: ...

    @overload
    def invert(self, c: str) -> str: ...

    def invert(self, c: Union[int, str]) -> Union[int, str]:
        if isinstance(c, str):
            return self.alphabet.symbol(self.invert(self.alphabet.index(c)))
        return self._shift(c, -1)

    def _shift(self, p: int, step: int) -> int:
        index = self.wrap(p)
        ch = self.alphabet.symbol(index)
        for cycle in self._cycles:
            k = cycle.find(ch)
            if k >= 0:
                return self.alphabet.index(cycle[(k + step) % len(cycle)])
        return index

    def is_derangement(self) -> bool:
        return all(self.permute(i) != i for i in range(self.size))

    # nicety for debugging
    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"<Permutation {' '.join(f'({c})' for c in self._cycles)}>"
