import os
import sys

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from gsm.config import ConnectionStore  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_config_dir(monkeypatch, tmp_path):
    """Keep every test away from the real ~/.gsm directory."""
    config_dir = tmp_path / "gsm-home"
    monkeypatch.setenv("GSM_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "store" / "config.json")


@pytest.fixture
def make_store(store_path):
    """Return a factory creating a saved and loaded store holding the given connections."""

    def _make(*connections):
        store = ConnectionStore(store_path)
        store.load()
        for conn in connections:
            store.add_connection(conn)
        store.save()
        store.load()
        return store

    return _make


@pytest.fixture
def small_dictionary():
    """Sixteen words, so each pick consumes exactly one hex digit of the seed."""
    return [f"w{i}" for i in range(16)]
