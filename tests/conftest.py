"""Pytest configuration and fixtures."""

import random
from unittest.mock import Mock

import pytest

from callwatch.config import FilterConfig, InMemoryFilterStore, ParsingConfig
from callwatch.config.settings import EngineSettings, reset_settings
from callwatch.logging.event_logger import EventLogger
from callwatch.mock import ManualTimerQueue, MockDevice, screens
from callwatch.state_machine.context import SharedContext
from callwatch.state_machine.notifier import Notifier


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep log files and settings from leaking between tests."""
    monkeypatch.setenv("CALLWATCH_LOG_PATH", str(tmp_path / "logs"))
    monkeypatch.setenv("CALLWATCH_DISABLE_CONSOLE_LOGGING", "1")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(_env_file=None)


@pytest.fixture
def filter_store() -> InMemoryFilterStore:
    """Store accepting anything from 30,000 up."""
    return InMemoryFilterStore(FilterConfig(min_amount=30000))


@pytest.fixture
def device() -> MockDevice:
    return MockDevice(screens.list_screen())


@pytest.fixture
def timer_queue() -> ManualTimerQueue:
    return ManualTimerQueue()


@pytest.fixture
def event_logger() -> Mock:
    return Mock(spec=EventLogger)


@pytest.fixture
def notifier() -> Mock:
    return Mock(spec=Notifier)


@pytest.fixture
def low_jitter() -> random.Random:
    """Random source whose jitter is always at the bottom of the range."""
    rng = Mock(spec=random.Random)
    rng.uniform.return_value = 0.0
    return rng


@pytest.fixture
def parsing_config() -> ParsingConfig:
    return ParsingConfig()


@pytest.fixture
def context(settings, device, filter_store, event_logger, timer_queue, notifier) -> SharedContext:
    """Handler context on a virtual clock."""
    return SharedContext(
        settings=settings,
        device=device,
        config_provider=filter_store,
        event_logger=event_logger,
        clock_ms=timer_queue.monotonic_ms,
        notifier=notifier,
    )
