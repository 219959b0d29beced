"""Test fixtures for bookstack-cli tests.

This module provides:
- FakeBookStackAPI, an in-memory transport that records calls
- Directory tree builders for import tests
"""

from .fake_bookstack import FakeBookStackAPI, WRITE_METHODS
from .sample_trees import build_nested_tree, build_sample_tree, write_tree

__all__ = [
    'FakeBookStackAPI',
    'WRITE_METHODS',
    'build_nested_tree',
    'build_sample_tree',
    'write_tree',
]
