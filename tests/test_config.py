"""Tests for environment driven configuration."""

import importlib

import pytest

import config


@pytest.fixture
def reload_config(monkeypatch):
    yield lambda: importlib.reload(config)
    monkeypatch.undo()
    importlib.reload(config)


def test_defaults(monkeypatch, reload_config):
    for name in ("BILLCHAT_DEFAULT_CURRENCY", "BILLCHAT_RECONCILE_TOLERANCE"):
        monkeypatch.delenv(name, raising=False)
    cfg = reload_config()
    assert cfg.CURRENCY_DEFAULT == "USD"
    assert cfg.RECONCILE_TOLERANCE == 0.01


def test_environment_overrides(monkeypatch, reload_config):
    monkeypatch.setenv("BILLCHAT_DEFAULT_CURRENCY", "EUR")
    monkeypatch.setenv("BILLCHAT_RECONCILE_TOLERANCE", "0.05")
    monkeypatch.setenv("BILLCHAT_ITEM_PRICE_MAX", "500")
    cfg = reload_config()
    assert cfg.CURRENCY_DEFAULT == "EUR"
    assert cfg.RECONCILE_TOLERANCE == 0.05
    assert cfg.ITEM_PRICE_MAX == 500.0
