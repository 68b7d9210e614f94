"""Shared test doubles: re-export memory backends and the mock job engine."""

from __future__ import annotations

from callsight.engines.mock_engine import MockJobEngine
from callsight.persistence.memory_backend import MemoryObjectStore, MemoryRecordStore

__all__ = ["MemoryObjectStore", "MemoryRecordStore", "MockJobEngine"]
