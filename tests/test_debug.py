import logging

import pytest

from debug import Debug


@pytest.fixture
def dbg():
    d = Debug()
    saved = d.status()
    yield d
    for component, state in saved.items():
        (d.enable if state else d.disable)(component)
    d.toggle_global(True)


class TestDebug:
    def test_components_off_by_default(self, dbg):
        assert not any(dbg.status().values())

    def test_switch_reaches_every_instance(self, dbg):
        dbg.enable("stepping")
        assert Debug().status()["stepping"]

    def test_unknown_component(self, dbg):
        with pytest.raises(ValueError):
            dbg.enable("keyboard")

    def test_toggle(self, dbg):
        dbg.toggle("encipher")
        assert dbg.status()["encipher"]
        dbg.toggle("encipher")
        assert not dbg.status()["encipher"]

    def test_stepping_is_logged(self, dbg, naval, caplog):
        dbg.enable("stepping")
        with caplog.at_level(logging.DEBUG, logger="ENIGMA"):
            naval.convert(0)
        assert "[STEPPING]" in caplog.text
        assert "AXLF" in caplog.text

    def test_global_switch(self, dbg, naval, caplog):
        dbg.enable("stepping", "encipher")
        dbg.toggle_global(False)
        with caplog.at_level(logging.DEBUG, logger="ENIGMA"):
            naval.convert(0)
        assert caplog.text == ""
