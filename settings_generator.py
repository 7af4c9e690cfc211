# settings_generator.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List, Optional

from errors import ConfigError, EnigmaError
from machine import Machine
from rotor_and_reflector import Rotor
from suites import SUITES, build_machine
from utilities import load_config

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    k = min(k, len(alpha) // 2)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def _pick(candidates: List[Rotor], k: int, kind: str, rng) -> List[str]:
    names = sorted(r.name for r in candidates)
    if len(names) < k:
        raise ConfigError(f"need {k} {kind} rotors, catalog has {len(names)}")
    return rng.sample(names, k)


def generate_settings(
    machine: Machine,
    rng: Random | SystemRandom,
    *,
    pairs: int = 10,
    rings: bool = True,
) -> str:
    """Return a random settings line that *machine* accepts."""
    catalog = list(machine.available_rotors.values())
    m, p = machine.num_rotors, machine.num_pawls

    reflectors = [r for r in catalog if r.reflecting]
    fixed = [r for r in catalog if not r.rotates and not r.reflecting]
    moving = [r for r in catalog if r.rotates]

    names = (
        _pick(reflectors, 1, "reflector", rng)
        + _pick(fixed, m - p - 1, "non-moving", rng)
        + _pick(moving, p, "moving", rng)
    )

    alpha = machine.alphabet.symbols
    fields = ["*", *names, "".join(rng.choices(alpha, k=m - 1))]
    if rings:
        fields.append("".join(rng.choices(alpha, k=m - 1)))
    fields.extend(f"({pair})" for pair in choose_pairs(alpha, pairs, rng))
    return " ".join(fields)


def parse_cli(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random settings line")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--config", type=Path, help="Machine configuration file")
    source.add_argument("--suite", choices=sorted(SUITES), help="Built-in machine")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=10, help="Plugboard pairs (default: 10)")
    p.add_argument("--no-rings", dest="rings", action="store_false", help="Omit the ring setting")
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_cli(argv)
    try:
        machine = build_machine(args.suite) if args.suite else load_config(args.config)
        line = generate_settings(
            machine, build_rng(args.seed), pairs=args.pairs, rings=args.rings
        )
    except EnigmaError as excp:
        print(f"Error: {excp}", file=sys.stderr)
        return 1
    print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
