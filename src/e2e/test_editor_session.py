import asyncio
import threading
import time

import pytest
from isipython.editor import (
    EditorSession, ThreadingScheduler, TkScheduler, open_session, register_isipython,
)
from isipython.engine import Engine
from isipython.models import Position


class _Handle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Records timers; tests fire them by hand."""

    def __init__(self):
        self.handles: list[_Handle] = []

    def call_later(self, delay, callback):
        h = _Handle(delay, callback)
        self.handles.append(h)
        return h

    def live(self):
        return [h for h in self.handles if not h.cancelled]

    def run_all(self):
        for h in self.live():
            h.callback()


class RecordingSink:
    def __init__(self):
        self.calls: list[tuple[str, list]] = []

    def set_markers(self, owner, diagnostics):
        self.calls.append((owner, list(diagnostics)))

    @property
    def last(self):
        return self.calls[-1][1]


def _session(text=""):
    sched, sink = FakeScheduler(), RecordingSink()
    return EditorSession(text, scheduler=sched, sink=sink), sched, sink


@pytest.mark.e2e
def test_validates_once_on_open():
    s, sched, sink = _session("ukuba x")
    assert s.passes == 1
    assert [d.code for d in sink.last] == ["E101"]
    assert sink.calls[0][0] == "isipython"
    assert sched.handles == []


@pytest.mark.e2e
def test_burst_of_edits_validates_once_with_latest_text():
    s, sched, sink = _session()
    for text in ("u", "uk", "ukuba", "ukuba x", "ukuba x:"):
        s.on_change(text)
    assert s.pending
    assert len(sched.live()) == 1
    assert all(h.delay == 0.5 for h in sched.handles)

    sched.run_all()
    assert s.passes == 2  # open + one debounced pass
    assert sink.last == []
    assert not s.pending


@pytest.mark.e2e
def test_stale_timer_does_nothing():
    s, sched, sink = _session()
    s.on_change("ukuba x")
    stale = sched.handles[0]
    s.on_change("ukuba x:")
    stale.callback()  # fired despite cancel()
    assert s.passes == 1
    sched.run_all()
    assert s.passes == 2 and sink.last == []


@pytest.mark.e2e
def test_flush_runs_pending_pass_immediately():
    s, sched, sink = _session()
    s.on_change("ngexesha x")
    s.flush()
    assert [d.code for d in sink.last] == ["E104"]
    assert not s.pending and sched.live() == []
    s.flush()  # nothing pending
    assert s.passes == 2


@pytest.mark.e2e
def test_replace_buffer_clears_old_markers_first():
    s, sched, sink = _session("ukuba x")
    s.on_change("ukuba y")
    s.replace_buffer("x = 1")
    assert sink.calls[-2] == ("isipython", [])
    assert sink.last == []
    assert s.text == "x = 1"
    assert sched.live() == []


@pytest.mark.e2e
def test_close_clears_markers_and_rejects_use():
    s, sched, sink = _session("ukuba x")
    s.on_change("ukuba y")
    pending = sched.handles[0]
    s.close()
    assert s.closed and sink.last == [] and pending.cancelled
    pending.callback()
    assert sink.last == []
    with pytest.raises(RuntimeError):
        s.on_change("x")
    s.close()  # idempotent


@pytest.mark.e2e
def test_editor_services_follow_the_buffer():
    s, _, _ = _session("chaza add(a, b):\n    buyisela a + b\n")
    assert s.translated() == "def add(a, b):\n    return a + b\n"
    assert s.completions(Position(3, 1))[0].label == "add"
    assert any(t.value == "chaza" for t in s.tokens())


@pytest.mark.e2e
def test_asyncio_loop_is_a_scheduler():
    async def run():
        sink = RecordingSink()
        s = EditorSession(scheduler=asyncio.get_running_loop(), sink=sink, debounce_ms=10)
        s.on_change("ukuba x")
        s.on_change("ukuba x > 1")
        await asyncio.sleep(0.1)
        return s, sink

    s, sink = asyncio.run(run())
    assert s.passes == 2
    assert [d.code for d in sink.last] == ["E101"]


@pytest.mark.e2e
def test_threading_scheduler():
    done = threading.Event()

    class Sink(RecordingSink):
        def set_markers(self, owner, diagnostics):
            super().set_markers(owner, diagnostics)
            if len(self.calls) == 2:
                done.set()

    sink = Sink()
    s = EditorSession(scheduler=ThreadingScheduler(), sink=sink, debounce_ms=10)
    s.on_change("enye")
    assert done.wait(2.0)
    assert [d.code for d in sink.last] == ["E102"]


@pytest.mark.e2e
def test_tk_scheduler_uses_after():
    class Widget:
        def __init__(self):
            self.after_calls, self.cancelled = [], []

        def after(self, ms, cb):
            self.after_calls.append((ms, cb))
            return f"after#{len(self.after_calls)}"

        def after_cancel(self, after_id):
            self.cancelled.append(after_id)

    w = Widget()
    s = EditorSession(scheduler=TkScheduler(w), sink=RecordingSink())
    s.on_change("a")
    s.on_change("b")
    assert [ms for ms, _ in w.after_calls] == [500, 500]
    assert w.cancelled == ["after#1"]


class FakeHost(RecordingSink):
    def __init__(self):
        super().__init__()
        self.registered = {}

    def register_language(self, language_id):
        self.registered["language"] = language_id

    def set_tokens_provider(self, language_id, tokenizer):
        self.registered["tokens"] = tokenizer

    def define_theme(self, name, theme):
        self.registered["theme"] = (name, theme)

    def set_language_configuration(self, language_id, configuration):
        self.registered["config"] = configuration

    def register_completion_provider(self, language_id, provider):
        self.registered["complete"] = provider


@pytest.mark.e2e
def test_register_with_host_and_open_session():
    host = FakeHost()
    eng = register_isipython(host, Engine())
    reg = host.registered
    assert reg["language"] == "isipython"
    assert reg["tokens"] is eng.tokenizer
    name, theme = reg["theme"]
    assert name == "isipython-theme" and theme["rules"]
    assert reg["config"]["comments"]["lineComment"] == "#"
    assert reg["complete"]("ch", Position(1, 3))[0].label == "chaza"

    s = open_session(host, "enye", FakeScheduler(), engine=eng)
    assert [d.code for d in host.last] == ["E102"]
    s.close()
    assert host.last == []


class SlowEngine(Engine):
    """Validation of any buffer mentioning "slow" takes a while."""

    def validate(self, text):
        if text and "slow" in text:
            time.sleep(0.4)
        return super().validate(text)


@pytest.mark.e2e
def test_slow_superseded_pass_never_overwrites_newer_markers():
    sink = RecordingSink()
    s = EditorSession(scheduler=ThreadingScheduler(), sink=sink, engine=SlowEngine(), debounce_ms=0)
    s.on_change("ukuba slow")
    time.sleep(0.1)  # slow pass is running on its timer thread
    s.on_change("ukuba fast:\n    dlula")
    time.sleep(0.8)

    assert s.text == "ukuba fast:\n    dlula"
    assert s.diagnostics == []
    assert sink.last == []
    assert all(not any(d.code == "E101" for d in diags) for _, diags in sink.calls)


@pytest.mark.e2e
def test_flush_supersedes_a_pass_already_running():
    sink = RecordingSink()
    s = EditorSession(scheduler=ThreadingScheduler(), sink=sink, engine=SlowEngine(), debounce_ms=50)
    s.on_change("ukuba slow")
    time.sleep(0.15)
    s.on_change("enye")
    s.flush()
    assert [d.code for d in sink.last] == ["E102"]
    time.sleep(0.6)
    assert [d.code for d in s.diagnostics] == ["E102"]
    assert [d.code for d in sink.last] == ["E102"]
