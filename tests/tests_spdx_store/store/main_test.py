from spdx_store.config import Config
from spdx_store.error import InvalidInputError
from spdx_store.store import load_store
from spdx_store.store.backends.memory import InMemoryStore

import pytest


def test_load_store():
    store = load_store("memory", {"option": 1})
    assert isinstance(store, InMemoryStore)
    assert store.store_configuration == {"option": 1}

    # Each call returns a new store
    assert load_store("memory") is not store


def test_load_store_from_config(tmp_path):
    config_file = tmp_path / "spdx-store.toml"
    config_file.write_text('[store]\nbackend = "memory"\n')
    Config.load_file(str(config_file))

    assert isinstance(load_store(), InMemoryStore)


def test_load_unknown_store():
    with pytest.raises(InvalidInputError) as err:
        load_store("no-such-backend")
    assert err.value.origin == "load_store"
