import logging

import pytest

from tictactoe.debug import DebugLevel, DebugManager


@pytest.fixture
def manager():
    manager = DebugManager("tictactoe.test")
    yield manager
    manager.configure(level=DebugLevel.WARNING, components=[])


def test_messages_below_level_are_dropped(manager, caplog):
    caplog.set_level(logging.DEBUG, logger="tictactoe.test")
    manager.configure(level=DebugLevel.INFO)

    manager.info("kept", "engine")
    manager.debug("dropped", "engine")

    assert [r.getMessage() for r in caplog.records] == ["[engine] kept"]


def test_component_filter(manager, caplog):
    caplog.set_level(logging.DEBUG, logger="tictactoe.test")
    manager.configure(level=DebugLevel.DEBUG, components=["search"])

    manager.debug("searching", "search")
    manager.debug("applying", "engine")
    manager.debug("untagged")

    assert [r.getMessage() for r in caplog.records] == ["[search] searching", "untagged"]


def test_disabled_manager_is_silent(manager):
    manager.configure(level=DebugLevel.TRACE, enabled=False)
    assert not manager.is_enabled_for(DebugLevel.ERROR)


def test_none_level_is_silent(manager):
    manager.configure(level=DebugLevel.NONE)
    assert not manager.is_enabled_for(DebugLevel.ERROR)


def test_set_from_string(manager):
    assert manager.set_from_string("trace")
    assert manager.level == DebugLevel.TRACE
    assert not manager.set_from_string("loud")
    assert manager.level == DebugLevel.TRACE


def test_timers(manager):
    with manager.timed("block"):
        pass

    manager.start_timer("manual")
    assert manager.end_timer("manual") >= 0
    assert manager.end_timer("never-started") is None
