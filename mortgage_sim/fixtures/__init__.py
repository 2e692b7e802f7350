"""Fixture layer package for the shared in-memory domain store."""

from .store import FixtureStore, Record

__all__ = ["FixtureStore", "Record"]
