"""Screenshot framing pipeline: framing, combining and view-state coordination."""

__version__ = "0.1.0"
