from __future__ import annotations
import logging
import os
from typing import Iterable, Optional

from . import config as CFG
from .translator import Translator

log = logging.getLogger(__name__)

_SUPPORTED = tuple(CFG.SURFACE_EXTS) + tuple(CFG.TARGET_EXTS)


def _iter_source_paths(roots: Iterable[str]) -> Iterable[str]:
    """Yield source files recursively under each root (a root may itself be a file)."""
    for root in roots:
        root = os.path.abspath(root)
        if os.path.isfile(root):
            if root.lower().endswith(_SUPPORTED):
                yield root
            continue
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in CFG.EXCLUDE_DIRS)
            for fn in sorted(filenames):
                if fn.lower().endswith(_SUPPORTED):
                    yield os.path.join(dirpath, fn)


def iter_source_files(roots: Iterable[str]) -> list[str]:
    roots = list(roots)
    if not roots:
        raise ValueError("iter_source_files(): at least one root is required")
    paths = list(_iter_source_paths(roots))
    log.info("Found %d source files under %s", len(paths), roots)
    return paths


def read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def load_source(path: str, translator: Optional[Translator] = None) -> str:
    """
    Read a file as isiPython source.

    Python files (.py) are translated into isiPython on the way in, so an
    existing program can be opened in the editor; isiPython / text files are
    returned verbatim.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    ext = os.path.splitext(path)[1].lower()
    if ext in CFG.TARGET_EXTS:
        log.info("Translating Python file %s to isiPython", path)
        return (translator or Translator()).translate_reverse(read_text(path))
    if ext in CFG.SURFACE_EXTS:
        return read_text(path)
    raise ValueError(f"unsupported file type {ext!r} (expected one of {', '.join(_SUPPORTED)})")
