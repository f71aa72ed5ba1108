"""Quick Stream: pick a saved URL and preset, stream in the background."""

__version__ = "0.1.0"
