# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Merged configuration values with per-key provenance.

The store keeps two parallel maps keyed by ConfigKey: the resolved value
and the Provenance of the source that last wrote it. Each update() call is
one indivisible write, so a reader never sees half of a source applied.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import threading
from typing import Any

from envguard.keys import ConfigKey, KeyLike, as_key


@dataclass(frozen=True)
class Provenance:
    """Where a stored value came from.

    Attributes:
        source: Source name (a file path, "environment", "properties", ...).
        external_name: The environment-style name that was read, for
            name-encoded sources. None for sources keyed by key text.

    """

    source: str
    external_name: str | None = None


class Store:
    """Resolved values plus provenance, shared by one Config."""

    def __init__(self) -> None:
        self._values: dict[ConfigKey, Any] = {}
        self._provenance: dict[ConfigKey, Provenance] = {}
        self._lock = threading.RLock()

    def update(self, entries: Iterable[tuple[ConfigKey, Any, Provenance]]) -> None:
        """Write every entry in one atomic step (later entries win)."""
        staged = list(entries)
        with self._lock:
            for key, value, origin in staged:
                self._values[key] = value
                self._provenance[key] = origin

    def get(self, key: KeyLike, default: Any = None) -> Any:
        with self._lock:
            return self._values.get(as_key(key), default)

    def provenance_of(self, key: KeyLike) -> Provenance | None:
        with self._lock:
            return self._provenance.get(as_key(key))

    def snapshot(self) -> dict[ConfigKey, Any]:
        """Return a copy of the current values."""
        with self._lock:
            return dict(self._values)

    def records(self) -> dict[ConfigKey, tuple[Any, Provenance]]:
        """Return a consistent copy of (value, provenance) per key."""
        with self._lock:
            return {k: (v, self._provenance[k]) for k, v in self._values.items()}

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._provenance.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
