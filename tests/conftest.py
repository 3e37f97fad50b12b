"""Pytest configuration and shared fixtures for the tidyopts test suite.

This module provides the engine double fixtures, a fixture for the real
libtidy engine (skipping when the library is absent), and the Hypothesis
profiles used by the property-based tests.
"""

import os
from pathlib import Path
from typing import Generator

import pytest
from fakes import RecordingEngine

from tidyopts.engine.libtidy import LibTidyEngine
from tidyopts.exceptions import EngineUnavailableError
from tidyopts.handle import EngineHandle
from tidyopts.setter import OptionSetter
from tidyopts.tidy import Tidy

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Verbosity, settings

    settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=50)

    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    # Hypothesis not installed, skip configuration
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests against a real libtidy")
    config.addinivalue_line("markers", "fuzzing: Property-based tests")


@pytest.fixture
def engine() -> RecordingEngine:
    """Provide a fresh recording engine double."""
    return RecordingEngine()


@pytest.fixture
def handle(engine: RecordingEngine) -> Generator[EngineHandle, None, None]:
    """Provide an open handle on the recording engine, closed after the test."""
    with EngineHandle(engine) as h:
        yield h


@pytest.fixture
def setter(handle: EngineHandle) -> OptionSetter:
    """Provide an option setter bound to the recording engine."""
    return OptionSetter(handle)


@pytest.fixture
def tidy(engine: RecordingEngine) -> Generator[Tidy, None, None]:
    """Provide a Tidy facade over the recording engine."""
    with Tidy(engine) as t:
        yield t


@pytest.fixture(scope="session")
def libtidy_engine() -> LibTidyEngine:
    """Provide the real libtidy engine, or skip when it cannot be loaded."""
    try:
        return LibTidyEngine()
    except EngineUnavailableError as e:
        pytest.skip(f"libtidy not available: {e}")


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Provide an empty directory for configuration file tests."""
    directory = tmp_path / "project"
    directory.mkdir()
    return directory
