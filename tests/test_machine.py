import pytest

from alphabet import Alphabet
from catalog import build_catalog
from errors import EnigmaError
from machine import Machine
from permutation import Permutation
from rotors import Rotor

MESSAGE = "FROM HIS SHOULDER HIAWATHA"


def tiny_machine():
    alpha = Alphabet("ABCD")
    rotors = [
        Rotor.reflector("R", Permutation("(AC) (BD)", alpha)),
        Rotor.moving("M", Permutation("(ABCD)", alpha), ""),
    ]
    machine = Machine(alpha, 2, 1, rotors)
    machine.insert_rotors(["R", "M"])
    return machine


class TestConstruction:
    def test_needs_two_slots(self, upper, catalog):
        with pytest.raises(EnigmaError):
            Machine(upper, 1, 0, catalog)

    @pytest.mark.parametrize("pawls", [-1, 5])
    def test_pawls_in_range(self, upper, catalog, pawls):
        with pytest.raises(EnigmaError):
            Machine(upper, 5, pawls, catalog)

    def test_duplicate_rotor_names(self, upper):
        perm = Permutation("(AB)", upper)
        with pytest.raises(EnigmaError):
            Machine(upper, 2, 0, [Rotor.reflector("B", perm), Rotor.reflector("B", perm)])

    def test_rotor_on_other_alphabet(self, upper):
        other = Alphabet("AB")
        with pytest.raises(EnigmaError):
            Machine(upper, 2, 0, [Rotor.reflector("B", Permutation("(AB)", other))])

    def test_convert_needs_rotors(self, machine):
        with pytest.raises(EnigmaError):
            machine.convert(0)


class TestInsertRotors:
    def test_insert_resets_settings(self, machine):
        machine.insert_rotors(["B", "BETA", "III", "IV", "I"])
        assert machine.rotor_names == ["B", "BETA", "III", "IV", "I"]
        assert machine.settings == "AAAA"

    def test_reinsert_resets_settings(self, naval):
        naval.insert_rotors(["B", "BETA", "III", "IV", "I"])
        assert naval.settings == "AAAA"

    @pytest.mark.parametrize(
        "names",
        [
            ["BETA", "B", "III", "IV", "I"],    # slot 0 not a reflector
            ["B", "BETA", "GAMMA", "IV", "I"],  # two moving rotors, three pawls
            ["B", "III", "II", "IV", "I"],      # four moving rotors
            ["B", "BETA", "III", "IV", "IX"],   # unknown rotor
            ["B", "BETA", "III", "IV"],         # too few slots
            ["B", "BETA", "III", "III", "I"],   # repeated rotor
            ["B", "C", "III", "IV", "I"],       # reflector outside slot 0
        ],
    )
    def test_failure_keeps_previous_stack(self, naval, names):
        before = (naval.rotor_names, naval.settings)
        with pytest.raises(EnigmaError):
            naval.insert_rotors(names)
        assert (naval.rotor_names, naval.settings) == before

    def test_catalog_is_never_touched(self, upper, catalog):
        first = Machine(upper, 5, 3, catalog)
        second = Machine(upper, 5, 3, catalog)
        for m in (first, second):
            m.insert_rotors(["B", "BETA", "III", "IV", "I"])
        first.set_rotors("AXLE")
        first.convert_message("HELLO")
        assert second.settings == "AAAA"
        assert all(r.setting == 0 for r in catalog)


class TestSetRotors:
    def test_needs_rotors(self, machine):
        with pytest.raises(EnigmaError, match="no rotors to configure"):
            machine.set_rotors("AXLE")

    def test_sets_slots_after_reflector(self, naval):
        assert naval.settings == "AXLE"
        assert naval.rotor(0).setting == 0
        assert naval.rotor(2).setting == 23

    @pytest.mark.parametrize("setting", ["AXL", "AXLEE", "AX1E"])
    def test_rejects_bad_settings(self, naval, setting):
        with pytest.raises(EnigmaError):
            naval.set_rotors(setting)
        assert naval.settings == "AXLE"

    def test_rings(self, naval):
        naval.set_rings("BBBB")
        assert [r.ring for r in naval.working_rotors] == [0, 1, 1, 1, 1]
        with pytest.raises(EnigmaError):
            naval.set_rings("BB")

    def test_plugboard_alphabet_must_match(self, naval):
        with pytest.raises(EnigmaError):
            naval.set_plugboard(Permutation("(AB)", Alphabet("AB")))


class TestStepping:
    def test_full_revolution(self):
        machine = tiny_machine()
        machine.set_rotors("C")
        for _ in range(machine.alphabet.size()):
            machine.convert(0)
        assert machine.settings == "C"

    def test_right_rotor_always_steps(self, naval):
        naval.convert(0)
        assert naval.settings == "AXLF"

    def test_double_step(self, upper, catalog):
        machine = Machine(upper, 4, 3, catalog)
        machine.insert_rotors(["B", "I", "II", "III"])
        machine.set_rotors("ADU")
        seen = []
        for _ in range(3):
            machine.convert(0)
            seen.append(machine.settings)
        assert seen == ["ADV", "AEW", "BFX"]

    def test_middle_at_notch_moves_all_three(self, upper, catalog):
        machine = Machine(upper, 4, 3, catalog)
        machine.insert_rotors(["B", "I", "II", "III"])
        machine.set_rotors("AEA")
        machine.convert(0)
        assert machine.settings == "BFB"

    def test_fixed_neighbour_blocks_double_step(self, naval):
        # III sits at its notch under the fixed BETA: nothing to carry into
        naval.set_rotors("AVAA")
        naval.convert(0)
        assert naval.settings == "AVAB"

    def test_notch_carries_into_middle(self, naval):
        naval.set_rotors("AAAQ")
        naval.convert(0)
        assert naval.settings == "AABR"


class TestConvert:
    def test_hand_worked_signal_path(self):
        machine = tiny_machine()
        assert machine.convert_message("A") == "C"
        machine.set_rotors("A")
        assert machine.convert_message("C") == "A"

    def test_self_reciprocal(self, naval, upper, catalog):
        cipher = naval.convert_message(MESSAGE)
        assert cipher != MESSAGE

        fresh = Machine(upper, 5, 3, catalog)
        fresh.insert_rotors(["B", "BETA", "III", "IV", "I"])
        fresh.set_rotors("AXLE")
        fresh.set_plugboard(Permutation("(YF) (ZH)", upper))
        assert fresh.convert_message(cipher) == MESSAGE

    def test_known_ciphertext(self, machine, upper):
        machine.insert_rotors(["B", "BETA", "III", "IV", "I"])
        machine.set_rotors("AXLE")
        machine.set_plugboard(Permutation("(HQ) (EX) (IP) (TR) (BY)", upper))
        cipher = machine.convert_message(MESSAGE)
        assert cipher.replace(" ", "") == "QVPQSOKOILPUBKJZPISFXDW"
        assert [len(word) for word in cipher.split()] == [4, 3, 8, 8]

    def test_reciprocal_with_rings(self, naval):
        naval.set_rings("CDEF")
        cipher = naval.convert_message(MESSAGE)
        naval.set_rotors("AXLE")
        assert naval.convert_message(cipher) == MESSAGE

    def test_never_maps_to_itself(self, naval, upper):
        for p in range(200):
            assert naval.convert(p % upper.size()) != p % upper.size()

    def test_passthrough_characters(self, naval):
        cipher = naval.convert_message("AB C,\tD\nE")
        assert [cipher[i] for i in (2, 4, 5, 7)] == [" ", ",", "\t", "\n"]
        assert naval.settings == "AXLJ"

    def test_foreign_character_fails(self, naval):
        with pytest.raises(EnigmaError):
            naval.convert_message("HELLO WORLD!")

    def test_try_convert_keeps_prefix(self, naval):
        expected = naval.convert_message("HELLO WORLD")
        naval.set_rotors("AXLE")
        result = naval.try_convert("HELLO WORLD!")
        assert not result.ok
        assert result.text == expected
        assert result.position == 11
        assert isinstance(result.error, EnigmaError)

    def test_try_convert_success(self, naval):
        result = naval.try_convert("HI THERE")
        assert result.ok
        assert result.position is None
        assert len(result.text) == 8
