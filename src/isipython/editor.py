# src/isipython/editor.py
"""
Live-editor integration: binds the tokenizer, validator and completion
provider to one buffer's lifecycle.

The only timing in the library lives here. Every content change cancels the
pending validation (if any) and arms a new one after DEBOUNCE_MS; at most one
pass is pending at any instant and the last write wins. The delivered
diagnostics always describe the full text as of the most recent pass.

Timers come from a Scheduler: anything with call_later(delay, callback)
returning a handle with cancel(). An asyncio event loop fits as-is;
ThreadingScheduler and TkScheduler cover threads and Tk widgets.
"""

from __future__ import annotations
import logging
import threading
from typing import Any, Callable, Optional, Protocol

from . import config as CFG
from .engine import Engine
from .models import Diagnostic, Position, Suggestion
from .tokenizer import Token, theme_rules, EDITOR_COLORS

log = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class MarkerSink(Protocol):
    """Whole-set marker replacement keyed by a stable owner id."""
    def set_markers(self, owner: str, diagnostics: list[Diagnostic]) -> None: ...


class HostEditor(MarkerSink, Protocol):
    def register_language(self, language_id: str) -> None: ...
    def set_tokens_provider(self, language_id: str, tokenizer: Any) -> None: ...
    def define_theme(self, name: str, theme: dict) -> None: ...
    def set_language_configuration(self, language_id: str, configuration: dict) -> None: ...
    def register_completion_provider(self, language_id: str,
                                     provider: Callable[[str, Position], list[Suggestion]]) -> None: ...


# ---------- schedulers ----------

class ThreadingScheduler:
    """call_later on top of threading.Timer (daemon threads)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        t = threading.Timer(delay, callback)
        t.daemon = True
        t.start()
        return t


class _TkHandle:
    def __init__(self, widget: Any, after_id: str) -> None:
        self._widget = widget
        self._after_id = after_id

    def cancel(self) -> None:
        self._widget.after_cancel(self._after_id)


class TkScheduler:
    """call_later on a Tk widget's event loop (after / after_cancel)."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def call_later(self, delay: float, callback: Callable[[], None]) -> _TkHandle:
        return _TkHandle(self._widget, self._widget.after(int(delay * 1000), callback))


# ---------- session ----------

class EditorSession:
    """
    One live buffer.

    Validates once on creation; on_change() re-arms the debounced pass;
    replace_buffer() drops everything tied to the old buffer; close() clears
    the host's markers. Diagnostics are replaced wholesale, never patched.
    """

    def __init__(
        self,
        text: str = "",
        *,
        scheduler: Scheduler,
        sink: MarkerSink,
        engine: Optional[Engine] = None,
        owner: str = CFG.MARKER_OWNER,
        debounce_ms: int = CFG.DEBOUNCE_MS,
    ) -> None:
        self.engine = engine or Engine()
        self.owner = owner
        self.delay = max(0, int(debounce_ms)) / 1000.0
        self._scheduler = scheduler
        self._sink = sink
        self._lock = threading.RLock()
        self._text = text or ""
        self._pending: Optional[Cancellable] = None
        self._generation = 0
        self._closed = False
        self.diagnostics: list[Diagnostic] = []
        self.passes = 0
        self._validate_now(self._generation)

    # ------------- properties -------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------- lifecycle -------------

    def on_change(self, text: str) -> None:
        """Buffer content changed: cancel the pending pass, arm a new one."""
        self._check_open()
        with self._lock:
            self._text = text or ""
            self._cancel_pending()
            self._generation += 1
            gen = self._generation
            self._pending = self._scheduler.call_later(self.delay, lambda: self._fire(gen))

    def flush(self) -> None:
        """Run the pending pass now (e.g. before submitting the code)."""
        self._check_open()
        with self._lock:
            if self._pending is None:
                return
            self._cancel_pending()
            self._generation += 1
            gen = self._generation
        self._validate_now(gen)

    def replace_buffer(self, text: str) -> None:
        """A different document was loaded; old diagnostics must not survive."""
        self._check_open()
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self._text = text or ""
            self.diagnostics = []
            gen = self._generation
            self._sink.set_markers(self.owner, [])
        self._validate_now(gen)

    def close(self) -> None:
        if self._closed:
            return
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self._closed = True
            self.diagnostics = []
            self._sink.set_markers(self.owner, [])
        log.info("EditorSession %s closed after %d passes", self.owner, self.passes)

    # ------------- editor services -------------

    def completions(self, position: Optional[Position] = None) -> list[Suggestion]:
        return self.engine.complete(self._text, position)

    def tokens(self) -> list[Token]:
        return self.engine.tokenize(self._text)

    def translated(self) -> str:
        """The buffer as Python, ready for the execution service."""
        return self.engine.translate_forward(self._text)

    # ------------- internals -------------

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("EditorSession is closed")

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self, gen: int) -> None:
        with self._lock:
            if gen != self._generation or self._closed:
                return  # superseded
            self._pending = None
        self._validate_now(gen)

    def _validate_now(self, gen: int) -> None:
        """
        Validate the buffer as of generation `gen` and publish the result.

        The pass runs outside the lock; a result whose generation was
        superseded meanwhile (new edit, flush, replace_buffer, close) is
        dropped, so the host never sees markers older than the ones it has.
        """
        with self._lock:
            text = self._text
        diags = self.engine.validate(text)
        with self._lock:
            if gen != self._generation or self._closed:
                log.debug("dropping stale validation pass (generation %d)", gen)
                return
            self.diagnostics = diags
            self.passes += 1
            self._sink.set_markers(self.owner, diags)
        log.debug("validation pass %d: %d diagnostics", self.passes, len(diags))


# ---------- host registration ----------

def register_isipython(host: HostEditor, engine: Optional[Engine] = None) -> Engine:
    """Register grammar, theme, language configuration and completions with a host editor."""
    engine = engine or Engine()
    host.register_language(CFG.LANGUAGE_ID)
    host.set_tokens_provider(CFG.LANGUAGE_ID, engine.tokenizer)
    host.define_theme(CFG.THEME_NAME, {
        "base": "vs", "inherit": True, "rules": theme_rules(), "colors": dict(EDITOR_COLORS),
    })
    host.set_language_configuration(CFG.LANGUAGE_ID, engine.language_configuration.to_dict())
    host.register_completion_provider(CFG.LANGUAGE_ID, engine.complete)
    log.info("Registered %s with host editor", CFG.LANGUAGE_ID)
    return engine


def open_session(host: HostEditor, text: str, scheduler: Scheduler,
                 engine: Optional[Engine] = None, **kw: Any) -> EditorSession:
    """A session whose markers go straight to the host."""
    return EditorSession(text, scheduler=scheduler, sink=host, engine=engine, **kw)
