"""
Test support for typedjobs tests.

Job definitions shared across test modules live in ``jobs.py``; fixtures
that wrap them are in ``tests/conftest.py``.
"""
