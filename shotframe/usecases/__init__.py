"""Use-case layer for the screenshot pipeline.

Each module coordinates domain objects and ports without performing image or
filesystem I/O directly, keeping the MVVM + hexagonal boundaries.
"""
