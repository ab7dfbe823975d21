# File: tests/test_events.py
import pytest

from web_spider.crawler.events import COMPLETED, DOWNLOADING, EVENT_NAMES, EventEmitter


def test_emit_reaches_named_and_catch_all_listeners(recorder):
    emitter = EventEmitter()
    named = []
    emitter.on(COMPLETED, named.append)
    emitter.on_any(recorder)

    emitter.emit(DOWNLOADING, url="u", filename="f")
    emitter.emit(COMPLETED, url="u", filename="f")

    assert [e.name for e in named] == [COMPLETED]
    assert recorder.names == [DOWNLOADING, COMPLETED]
    assert recorder.events[1].payload == {"url": "u", "filename": "f"}


def test_off_removes_listener():
    emitter = EventEmitter()
    seen = []
    emitter.on(COMPLETED, seen.append)
    emitter.off(COMPLETED, seen.append)
    emitter.off(COMPLETED, seen.append)
    emitter.emit(COMPLETED, url="u", filename="f")
    assert seen == []


def test_failing_listener_does_not_stop_others():
    emitter = EventEmitter()
    seen = []

    def broken(_event):
        raise RuntimeError("observer bug")

    emitter.on(COMPLETED, broken)
    emitter.on(COMPLETED, seen.append)
    emitter.emit(COMPLETED, url="u", filename="f")
    assert len(seen) == 1


def test_unknown_event_name_rejected():
    emitter = EventEmitter()
    with pytest.raises(ValueError):
        emitter.emit("finished")
    with pytest.raises(ValueError):
        emitter.on("finished", print)


def test_event_names_match_wire_names():
    assert "spider-complete" in EVENT_NAMES
    assert "file-not-exists" in EVENT_NAMES
    assert len(EVENT_NAMES) == 11
