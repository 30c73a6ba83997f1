from __future__ import annotations

from pathlib import Path

import pytest

from reviewhelper.config.loader import ConfigLoader
from reviewhelper.core.lifecycle import ConversationLifecycle
from reviewhelper.core.reconcilers import Reconcilers
from reviewhelper.core.signals import SignalRegistry
from reviewhelper.core.store import SessionStore
from tests.helpers import FakeLocators, FakePage


@pytest.fixture()
def helper_config():
    config_path = Path(__file__).resolve().parents[1] / "config" / "review_helper.json"
    return ConfigLoader.load(config_path)


@pytest.fixture()
def store():
    return SessionStore()


@pytest.fixture()
def signals():
    return SignalRegistry()


@pytest.fixture()
def page():
    return FakePage()


@pytest.fixture()
def locators():
    return FakeLocators()


@pytest.fixture()
def lifecycle(store, signals):
    return ConversationLifecycle(store, signals)


@pytest.fixture()
def reconcilers(store, locators, page, lifecycle):
    return Reconcilers(store, locators, page, lifecycle)
