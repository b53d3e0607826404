# app.py
# CustomTkinter desktop editor for isiPython (dark theme).
# - Open an isiPython file, or a Python file (translated into isiPython on load).
# - Live diagnostics with debounce through an EditorSession on Tk's event loop.
# - Syntax colouring from the display tokenizer; Python preview on demand.

from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional

import tkinter.filedialog as fd
import tkinter.messagebox as mb
import customtkinter as ctk

# Project imports (ensure PYTHONPATH=src)
from isipython.editor import EditorSession, TkScheduler
from isipython.engine import Engine
from isipython.loader import load_source
from isipython.models import Diagnostic
from isipython.tokenizer import THEME, TokenKind


# -------------------- small helpers --------------------

def shorten_path(p: str, max_chars: int = 60) -> str:
    """Shorten long paths neatly for labels."""
    if len(p) <= max_chars:
        return p
    keep = max_chars // 2 - 3
    return p[:keep] + "..." + p[-keep:]


SAMPLE = """chaza add(a, b):
    buyisela a + b

ukuba add(2, 3) > 4:
    print("kulungile")
enye:
    print("hayi")
"""


# -------------------- main app --------------------

class IsiPythonApp(ctk.CTk):
    """Dark-themed editor window; it is also the marker sink of its EditorSession."""

    def __init__(self) -> None:
        super().__init__()

        # Theme
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        # Window
        self.title("isiPython Editor")
        self.geometry("1000x700")
        self.minsize(860, 580)

        # State
        self._current_path: Optional[str] = None
        self._engine = Engine()

        # Fonts
        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_label = ctk.CTkFont(size=13)
        self.font_mono = ctk.CTkFont(family="Cascadia Mono, Menlo, Consolas, Courier New", size=13)

        # Layout grid
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)  # editor + preview
        self.grid_rowconfigure(3, weight=0)  # diagnostics

        # Build UI
        self._build_header()
        self._build_editor()
        self._build_diagnostics()

        self._session = EditorSession(
            SAMPLE, scheduler=TkScheduler(self), sink=self, engine=self._engine,
        )
        self._set_source(SAMPLE)
        self._set_status("Ready")
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        header.grid_columnconfigure(3, weight=1)

        title = ctk.CTkLabel(header, text="isiPython", font=self.font_title)
        title.grid(row=0, column=0, sticky="w", padx=12, pady=10)

        ctk.CTkButton(header, text="Open File", command=self._choose_file).grid(
            row=0, column=1, padx=(12, 6), pady=10
        )
        ctk.CTkButton(header, text="Translate → Python", command=self._show_python).grid(
            row=0, column=2, padx=(0, 6), pady=10
        )

        self.lbl_source = ctk.CTkLabel(header, text="(unsaved buffer)", anchor="w", font=self.font_label)
        self.lbl_source.grid(row=0, column=3, sticky="ew", padx=6, pady=10)

        self.lbl_status = ctk.CTkLabel(header, text="Status: —", anchor="e")
        self.lbl_status.grid(row=0, column=4, sticky="e", padx=12, pady=10)

    def _build_editor(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=2, column=0, sticky="nsew", padx=12, pady=6)
        frame.grid_columnconfigure((0, 1), weight=1)
        frame.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(frame, text="isiPython", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 2)
        )
        ctk.CTkLabel(frame, text="Python", font=self.font_label).grid(
            row=0, column=1, sticky="w", padx=12, pady=(10, 2)
        )

        self.txt_src = ctk.CTkTextbox(frame, wrap="none", font=self.font_mono, undo=True)
        self.txt_src.grid(row=1, column=0, sticky="nsew", padx=(12, 6), pady=(0, 12))
        self.txt_src.bind("<KeyRelease>", self._on_source_changed)

        for kind, style in THEME.items():
            self.txt_src.tag_config(kind.value, foreground=f"#{style.foreground}")
        self.txt_src.tag_config("diagnostic", underline=True)

        self.txt_py = ctk.CTkTextbox(frame, wrap="none", font=self.font_mono)
        self.txt_py.grid(row=1, column=1, sticky="nsew", padx=(6, 12), pady=(0, 12))
        self.txt_py.configure(state="disabled")

    def _build_diagnostics(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=(6, 12))
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(frame, text="Problems", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 2)
        )

        self.txt_diag = ctk.CTkTextbox(frame, height=140, wrap="word", font=ctk.CTkFont(size=12))
        self.txt_diag.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        self.txt_diag.configure(state="disabled")

    # --------- marker sink (called by the session) ---------

    def set_markers(self, owner: str, diagnostics: List[Diagnostic]) -> None:
        self.txt_src.tag_remove("diagnostic", "1.0", "end")
        for d in diagnostics:
            self.txt_src.tag_add("diagnostic", f"{d.line}.{d.column - 1}", f"{d.line}.{d.end_column - 1}")
        self._highlight()

        lines = [d.format() for d in diagnostics] or ["No problems."]
        self._set_text(self.txt_diag, "\n".join(lines))
        n = len(diagnostics)
        self._set_status(f"{n} problem{'s' if n != 1 else ''}" if n else "OK")

    # --------- source selection ---------

    def _choose_file(self) -> None:
        path = fd.askopenfilename(
            title="Open source file",
            filetypes=[("isiPython / Python", "*.isi *.isipy *.py *.txt"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            text = load_source(path, self._engine.translator)
        except (OSError, ValueError) as exc:
            mb.showerror("Open error", f"Could not open file:\n{exc}")
            return
        self._current_path = path
        self.lbl_source.configure(text=shorten_path(path))
        self._set_source(text)
        self._session.replace_buffer(text)
        if Path(path).suffix.lower() == ".py":
            self._set_status(f"Translated {os.path.basename(path)} into isiPython")

    # --------- editing ---------

    def _on_source_changed(self, _ev=None) -> None:
        # debounced inside the session
        self._session.on_change(self.txt_src.get("1.0", "end-1c"))

    def _show_python(self) -> None:
        self._session.flush()
        self._set_text(self.txt_py, self._session.translated())

    def _highlight(self) -> None:
        for kind in TokenKind:
            self.txt_src.tag_remove(kind.value, "1.0", "end")
        for t in self._engine.tokenize(self.txt_src.get("1.0", "end-1c")):
            if t.kind is TokenKind.WHITESPACE:
                continue
            self.txt_src.tag_add(t.kind.value, f"{t.line}.{t.column - 1}", f"{t.line}.{t.end_column - 1}")

    # --------- misc UI helpers ---------

    def _set_source(self, text: str) -> None:
        self.txt_src.delete("1.0", "end")
        self.txt_src.insert("1.0", text)
        self._highlight()

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    @staticmethod
    def _set_text(box: ctk.CTkTextbox, text: str) -> None:
        box.configure(state="normal")
        box.delete("1.0", "end")
        if text:
            box.insert("end", text)
        box.configure(state="disabled")

    # --------- lifecycle ---------

    def _on_close(self) -> None:
        self._session.close()
        self.destroy()


if __name__ == "__main__":
    app = IsiPythonApp()
    app.mainloop()
