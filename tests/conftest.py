"""
Shared pytest fixtures for the presto test suite.

Provides ready-built collaborators (introspector, formatter, renderers)
and isolates configuration from the real home directory and PRESTO_*
environment.

Usage in tests:
    def test_something(introspector, formatter):
        data = introspector.build(sample_order())
        assert formatter.formatted(data.values["id"]) == "SO-1"
"""

import pytest

from presto import ConfigManager, Introspector, RenderRegistry, ValueFormatter
from presto.config import ENV_OVERRIDES
from presto.output import TableRenderer, TreeOptions, TreeRenderer
from presto.presentation.symbols import ASCII, UNICODE


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """
    Keep every test away from ~/.presto and ambient PRESTO_* variables.

    The user config file is redirected into the test's tmp_path.
    """
    for env_key in ENV_OVERRIDES:
        monkeypatch.delenv(env_key, raising=False)
    user_dir = tmp_path / "home" / ".presto"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    return user_dir


@pytest.fixture
def registry():
    """Empty render registry."""
    return RenderRegistry()


@pytest.fixture
def introspector(registry):
    return Introspector(registry=registry)


@pytest.fixture
def formatter(registry):
    return ValueFormatter(registry=registry)


@pytest.fixture
def table_renderer():
    return TableRenderer(symbols=UNICODE)


@pytest.fixture
def ascii_table_renderer():
    return TableRenderer(symbols=ASCII)


@pytest.fixture
def tree_renderer():
    return TreeRenderer(TreeOptions(symbols=UNICODE))
