"""Shared fixtures for the rotor machine tests."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from alphabet_and_permutation import Alphabet, Permutation
from machine import Machine
from rotor_and_reflector import MovingRotor, Reflector
from suites import build_machine

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Rotors I-III, reflectors B and C of the Enigma I and the M4's Beta wheel.
ENIGMA_CONFIG = """\
ABCDEFGHIJKLMNOPQRSTUVWXYZ
4 3
 I MQ      (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
 II ME     (FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)
 III MV    (ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)
 Beta N    (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
 B R       (AY) (BR) (CU) (DH) (EQ) (FS) (GL) (IP) (JX) (KN) (MO)
           (TZ) (VW)
 C R       (AF)(BV)(CP)(DJ)(EI)(GO)(HY)(KR)(LZ)(MX)(NW)(QT)(SU)
"""


@pytest.fixture
def upper():
    return Alphabet(UPPER)


@pytest.fixture
def enigma_i():
    """An Enigma I with rotors B I II III selected at AAA."""
    machine = build_machine("enigma-i")
    machine.select_rotors(["B", "I", "II", "III"])
    machine.set_positions("AAA")
    return machine


@pytest.fixture
def tiny_machine():
    """Four-symbol machine: identity wheels that all carry at D."""
    alpha = Alphabet("ABCD")
    wheels = [
        Reflector("R", Permutation("(AB) (CD)", alpha)),
        MovingRotor("L", Permutation("", alpha), "D"),
        MovingRotor("M", Permutation("", alpha), "D"),
        MovingRotor("F", Permutation("", alpha), "D"),
    ]
    machine = Machine(alpha, 4, 3, wheels)
    machine.select_rotors(["R", "L", "M", "F"])
    machine.set_positions("AAA")
    return machine


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "enigma.conf"
    path.write_text(ENIGMA_CONFIG)
    return path
