"""
Test Fakes Module

Provides fake/stub implementations for testing.
These are minimal implementations that satisfy interfaces without real dependencies.
"""

from tests.fakes.fake_front_end import FakeSolidityFrontEnd
from tests.fakes.fake_reporter import RecordingReporter
from tests.fakes.fake_source_store import FakeSourceStore

__all__ = [
    "FakeSolidityFrontEnd",
    "FakeSourceStore",
    "RecordingReporter",
]
