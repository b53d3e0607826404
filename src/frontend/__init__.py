"""Outer surfaces for the isiPython bridge: Flask API/editor page (web) and the CLI (__main__)."""
