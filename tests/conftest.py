import pytest

from alphabet import Alphabet
from catalog import DEFAULT_NUM_PAWLS, DEFAULT_NUM_ROTORS, build_catalog
from machine import Machine
from permutation import Permutation


@pytest.fixture
def upper():
    return Alphabet()


@pytest.fixture
def catalog(upper):
    return build_catalog(upper)


@pytest.fixture
def machine(upper, catalog):
    return Machine(upper, DEFAULT_NUM_ROTORS, DEFAULT_NUM_PAWLS, catalog)


@pytest.fixture
def naval(machine, upper):
    """The standard B BETA III IV I set at AXLE with (YF) (ZH)."""
    machine.insert_rotors(["B", "BETA", "III", "IV", "I"])
    machine.set_rotors("AXLE")
    machine.set_plugboard(Permutation("(YF) (ZH)", upper))
    return machine
