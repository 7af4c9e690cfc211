"""Tests for utilities.py."""
import json

import pytest

from conftest import ENIGMA_CONFIG
from errors import ConfigError
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector
from utilities import (
    apply_settings,
    format_groups,
    is_settings_line,
    load_config,
    machine_from_dict,
    make_rotor,
    preprocess_message,
    read_config,
)


@pytest.fixture
def machine():
    return read_config(ENIGMA_CONFIG)


class TestReadConfig:
    def test_header(self, machine):
        assert machine.alphabet.symbols == "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
        assert machine.num_rotors == 4
        assert machine.num_pawls == 3

    def test_rotor_types(self, machine):
        rotors = machine.available_rotors
        assert set(rotors) == {"I", "II", "III", "Beta", "B", "C"}
        assert isinstance(rotors["I"], MovingRotor)
        assert rotors["I"].notches == "Q"
        assert isinstance(rotors["Beta"], FixedRotor)
        assert isinstance(rotors["B"], Reflector)

    def test_cycles_continue_across_lines(self, machine):
        refl = machine.available_rotors["B"]
        assert refl.permutation.permute("T") == "Z"
        assert refl.permutation.permute("W") == "V"

    def test_adjacent_groups(self, machine):
        assert machine.available_rotors["C"].permutation.permute("S") == "U"

    def test_wirings_match_history(self, machine):
        rotors = machine.available_rotors
        assert rotors["II"].permutation.wiring == "AJDKSIRUXBLHWTMCQGZNPYFVOE"
        assert rotors["III"].permutation.wiring == "BDFHJLCPRTXVZNYEIWGAKMUSQO"
        assert rotors["B"].permutation.wiring == "YRUHQSLDPXNGOKMIEBFZCWVJAT"

    def test_encrypts(self, machine):
        apply_settings(machine, "* B I II III AAA")
        assert machine.convert_text("AAAAA") == "BDZGO"

    def test_moving_rotor_without_notches(self):
        machine = read_config("ABCD 2 1 R R (AB)(CD) F M (ABC)")
        assert machine.available_rotors["F"].notches == ""

    @pytest.mark.parametrize(
        "text, message",
        [
            ("", "truncated"),
            ("ABCD", "truncated"),
            ("ABCD X 1", "numRotors must be int"),
            ("ABCD 2 Y", "numPawls must be int"),
            ("ABCD 2 1 R", "bad rotor description"),
            ("ABCD 2 1 R Q (AB)(CD)", "unknown type"),
        ],
    )
    def test_errors(self, text, message):
        with pytest.raises(ConfigError, match=message):
            read_config(text)

    def test_bad_alphabet(self):
        with pytest.raises(ConfigError):
            read_config("AAB 2 1")

    def test_bad_cycles(self):
        with pytest.raises(ConfigError):
            read_config("ABCD 2 1 R R (AB)(CD) F M (AE)")


class TestMakeRotor:
    def test_kinds(self, upper):
        assert isinstance(make_rotor("I", "MQ", "(AB)", upper), MovingRotor)
        assert isinstance(make_rotor("N1", "N", "", upper), FixedRotor)
        assert isinstance(make_rotor("R1", "R", "(" + upper.symbols + ")", upper), Reflector)


class TestJsonConfig:
    def _data(self):
        return {
            "alphabet": "ABCD",
            "rotors": 3,
            "pawls": 2,
            "catalog": [
                {"name": "R", "type": "R", "cycles": "(AB) (CD)"},
                {"name": "L", "type": "MD", "cycles": ""},
                {"name": "F", "type": "MD", "cycles": "(ABCD)"},
            ],
        }

    def test_from_dict(self):
        machine = machine_from_dict(self._data())
        assert machine.num_rotors == 3
        assert machine.available_rotors["L"].notches == "D"

    def test_missing_keys(self):
        data = self._data()
        del data["pawls"]
        with pytest.raises(ConfigError, match="pawls"):
            machine_from_dict(data)

    def test_bad_entry(self):
        data = self._data()
        data["catalog"].append({"cycles": "(AB)"})
        with pytest.raises(ConfigError, match="bad rotor description"):
            machine_from_dict(data)

    @pytest.mark.parametrize(
        "key, value, message",
        [
            ("alphabet", 123, "alphabet must be a string"),
            ("alphabet", ["A", "B"], "alphabet must be a string"),
            ("catalog", 5, "catalog must be a list"),
            ("catalog", {"name": "R"}, "catalog must be a list"),
        ],
    )
    def test_wrong_value_types(self, key, value, message):
        data = self._data()
        data[key] = value
        with pytest.raises(ConfigError, match=message):
            machine_from_dict(data)

    def test_load_json_file(self, tmp_path):
        path = tmp_path / "tiny.json"
        path.write_text(json.dumps(self._data()))
        machine = load_config(path)
        apply_settings(machine, "* R L F AA")
        assert machine.window == "AA"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{")
        with pytest.raises(ConfigError):
            load_config(path)


class TestLoadConfig:
    def test_text_file(self, config_file):
        assert load_config(config_file).num_rotors == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="could not open"):
            load_config(tmp_path / "nope.conf")


class TestApplySettings:
    def test_positions_only(self, machine):
        apply_settings(machine, "* B I II III XYZ")
        assert machine.window == "XYZ"
        assert machine.plugboard.cycles == ()

    def test_ring_setting(self, machine):
        apply_settings(machine, "* B I II III AAA BCD")
        assert machine.window == "ZYX"
        assert machine.rotor_at(3).ring_offset == 3

    def test_plugboard(self, machine):
        apply_settings(machine, "* B I II III AAA (AB) (CD)")
        assert machine.plugboard.permute("A") == "B"
        assert machine.plugboard.permute("D") == "C"
        assert machine.rotor_at(1).ring_offset == 0

    def test_ring_and_plugboard(self, machine):
        apply_settings(machine, "*  B I II III AAA BBB (AB)(CD)")
        assert machine.rotor_at(2).ring_offset == 1
        assert machine.plugboard.permute("C") == "D"

    def test_new_line_resets_plugboard_and_rings(self, machine):
        apply_settings(machine, "* B I II III AAA BBB (AB)")
        apply_settings(machine, "* B I II III AAA")
        assert machine.plugboard.cycles == ()
        assert machine.rotor_at(2).ring_offset == 0

    @pytest.mark.parametrize(
        "line",
        [
            "B I II III AAA",
            "*B I II III AAA",
            "* B I II",
            "* B I II III AAA BBB XYZ",
            "* B I II III AAA (AB) XY",
            "* B I II III AAA (AB",
            "* I B II III AAA",
        ],
    )
    def test_bad_lines(self, machine, line):
        with pytest.raises(ConfigError):
            apply_settings(machine, line)


class TestTextHelpers:
    def test_is_settings_line(self):
        assert is_settings_line("* B I II III AAA")
        assert is_settings_line("   *B")
        assert not is_settings_line("HELLO")
        assert not is_settings_line("")

    def test_preprocess(self):
        assert preprocess_message(" HELLO  WOR\tLD ") == "HELLOWORLD"

    def test_format_groups(self):
        assert format_groups("ABCDEFGHIJKL") == "ABCDE FGHIJ KL"
        assert format_groups("ABCDEFGHIJ") == "ABCDE FGHIJ"
        assert format_groups("ABCDEF", block=3) == "ABC DEF"
        assert format_groups("") == ""
        assert not format_groups("ABCDE").endswith(" ")
