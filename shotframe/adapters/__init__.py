"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (Pillow rendering and
    codecs, directory-backed library and files, settings storage, and test
    doubles) used by use cases.

Call context:
    Imported by the composition root in ``shotframe/app/main.py`` and by
    tests.
"""
