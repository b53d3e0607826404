from __future__ import annotations
import os
from pathlib import Path

# project root: isipython-bridge/
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Progress / debug logging (set ISIPYTHON_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("ISIPYTHON_VERBOSE") == "1"

# /* ~~~ editor integration ~~~ */
DEBOUNCE_MS: int = 500          # quiet period before revalidating a buffer
MARKER_OWNER: str = "isipython" # stable id the host editor keys markers by
LANGUAGE_ID: str = "isipython"
THEME_NAME: str = "isipython-theme"

# indentation: one block level
INDENT_WIDTH: int = 4

# /* ~~~ completion ~~~ */
MAX_SUGGESTIONS: int = 200
PRIORITY_DYNAMIC: int = 100     # identifiers scanned from the live buffer
PRIORITY_KEYWORD: int = 50
PRIORITY_BUILTIN: int = 40

# file types the loader understands
SURFACE_EXTS = [".isi", ".isipy", ".txt"]
TARGET_EXTS = [".py"]

# folders to skip
EXCLUDE_DIRS = {".git", ".hg", ".svn", ".idea", ".vscode", "node_modules", "__pycache__", ".venv"}

# web UI
HOST: str = "127.0.0.1"
PORT: int = 8000
