"""
Page builder test configuration and fixtures.
"""

import logging
import os

import pytest
from unittest.mock import Mock

from pagebuilder.config import PageBuilderConfig, reset_config
from pagebuilder.core.store import SectionStore
from pagebuilder.editing.scheduler import ManualScheduler
from pagebuilder.events import StoreEventType
from pagebuilder.persistence import InMemoryPageRepository


@pytest.fixture
def store():
    """Empty store with real-time preview on."""
    return SectionStore(page_id="test")


@pytest.fixture
def scheduler():
    """Virtual-clock scheduler for debounce timing."""
    return ManualScheduler()


@pytest.fixture
def populated_store():
    """Store holding hero, text and cta sections (orders 0, 1, 2)."""
    store = SectionStore(page_id="test")
    store.add_section("hero")
    store.add_section("text")
    store.add_section("cta")
    return store


@pytest.fixture
def commits(store):
    """Mock handler counting committed section updates on the store fixture."""
    handler = Mock()
    store.subscribe(StoreEventType.SECTION_UPDATED, handler)
    return handler


@pytest.fixture
def config():
    """Default configuration, independent of the environment."""
    return PageBuilderConfig()


@pytest.fixture
def hero_page():
    """Persisted page data with a single hero section."""
    return {
        "home": [
            {
                "id": "section-hero",
                "type": "hero",
                "order": 0,
                "content": "Welcome to the shop",
                "settings": {"hero": {"backgroundImage": "/hero.jpg", "overlayOpacity": 0.6}},
                "isVisible": True,
            },
        ],
    }


@pytest.fixture
def repository(hero_page):
    return InMemoryPageRepository(hero_page)


@pytest.fixture(autouse=True)
def _reset_global_config():
    yield
    reset_config()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No PAGEBUILDER_* variables and no config files on the search path."""
    for name in list(os.environ):
        if name.startswith("PAGEBUILDER_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def restore_root_logging():
    """Logging setup installs handlers on the root logger; put things back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
