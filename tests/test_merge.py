"""
Tests for envguard.merge and envguard.store modules.

Tests merging including:
- Last source wins, with provenance
- Unregistered and undecodable entries are dropped
- Coercion applies to encoded sources only
"""

from __future__ import annotations

from envguard import specs
from envguard.keys import ConfigKey
from envguard.merge import merge
from envguard.registry import Registry
from envguard.sources import RawSource
from envguard.store import Provenance, Store

PORT = ConfigKey("app.server", "http-port")
DOMAIN = ConfigKey("app.server", "domain")


def _registry() -> Registry:
    registry = Registry()
    registry.declare(PORT, specs.is_int, DOMAIN, specs.is_str)
    return registry


class TestMergePrecedence:
    """Tests for source precedence."""

    def test_later_source_wins(self):
        """Test that value and provenance both reflect the last writer."""
        store, registry = Store(), _registry()

        merge(store, registry, RawSource("a.yaml", {"app.server/http-port": 8080}))
        merge(store, registry, RawSource("b.yaml", {"app.server/http-port": 9090}))

        assert store.get(PORT) == 9090
        assert store.provenance_of(PORT) == Provenance("b.yaml")

    def test_untouched_keys_keep_earlier_values(self):
        """Test that merging is per key, not per source."""
        store, registry = Store(), _registry()

        merge(store, registry, RawSource("a.yaml", {"app.server/http-port": 1, "app.server/domain": "a"}))
        merge(store, registry, RawSource("b.yaml", {"app.server/http-port": 2}))

        assert store.get(DOMAIN) == "a"
        assert store.provenance_of(DOMAIN).source == "a.yaml"

    def test_values_replaced_not_deep_merged(self):
        """Test that dict values are replaced wholesale."""
        store, registry = Store(), Registry()
        registry.register("app/pool", specs.is_dict)

        merge(store, registry, RawSource("a", {"app/pool": {"min": 1, "max": 5}}))
        merge(store, registry, RawSource("b", {"app/pool": {"max": 9}}))

        assert store.get("app/pool") == {"max": 9}

    def test_file_then_environment_example(self):
        """Test the file-then-environment example end to end."""
        store, registry = Store(), _registry()

        merge(store, registry, RawSource("a.yaml", {"app.server/http-port": 8080}))
        merge(
            store,
            registry,
            RawSource("environment", {"APP__SERVER___HTTP_PORT": "9090"}, encoded=True),
        )

        assert store.get(PORT) == 9090
        assert store.provenance_of(PORT) == Provenance(
            "environment", "APP__SERVER___HTTP_PORT"
        )


class TestMergeFiltering:
    """Tests for dropped entries."""

    def test_unregistered_key_never_stored(self):
        """Test that names decoding to unregistered keys are ignored."""
        store, registry = Store(), _registry()

        written = merge(
            store, registry, RawSource("environment", {"UNKNOWN_THING": "foo"}, encoded=True)
        )

        assert written == []
        assert len(store) == 0

    def test_undecodable_names_dropped(self):
        """Test that names with no key mapping are ignored."""
        store, registry = Store(), _registry()

        merge(
            store,
            registry,
            RawSource(
                "environment",
                {"PATH": "/usr/bin", "_": "/bin/sh", "weird.name": "x"},
                encoded=True,
            ),
        )

        assert store.snapshot() == {}

    def test_file_entries_with_bad_keys_dropped(self):
        """Test that keyed sources skip invalid key text."""
        store, registry = Store(), _registry()

        written = merge(
            store,
            registry,
            RawSource("a.yaml", {"Not A Key": 1, 42: 2, "app.server/domain": "x"}),
        )

        assert written == [DOMAIN]

    def test_config_key_entries_accepted(self):
        """Test that keyed sources may use ConfigKey objects directly."""
        store, registry = Store(), _registry()

        merge(store, registry, RawSource("code", {PORT: 1}))

        assert store.get(PORT) == 1


class TestMergeCoercion:
    """Tests for coercion during merge."""

    def test_encoded_strings_are_coerced(self):
        """Test that environment strings become typed values."""
        store, registry = Store(), _registry()

        merge(
            store,
            registry,
            RawSource(
                "environment",
                {"APP__SERVER___HTTP_PORT": "9090", "APP__SERVER___DOMAIN": "1234"},
                encoded=True,
            ),
        )

        assert store.get(PORT) == 9090
        # Domain is a string spec, so the raw string already conforms
        assert store.get(DOMAIN) == "1234"

    def test_file_strings_are_not_coerced(self):
        """Test that quoted strings in files stay strings."""
        store, registry = Store(), _registry()

        merge(store, registry, RawSource("a.yaml", {"app.server/http-port": "9090"}))

        assert store.get(PORT) == "9090"


class TestStore:
    """Tests for Store accessors."""

    def test_snapshot_is_a_copy(self):
        """Test that mutating a snapshot does not touch the store."""
        store = Store()
        store.update([(PORT, 1, Provenance("a"))])

        snap = store.snapshot()
        snap[PORT] = 2

        assert store.get(PORT) == 1

    def test_clear(self):
        """Test that clear drops values and provenance."""
        store = Store()
        store.update([(PORT, 1, Provenance("a"))])

        store.clear()

        assert PORT not in store
        assert store.provenance_of(PORT) is None
