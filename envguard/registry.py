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

"""Registry of declared configuration keys.

The registry is the set of keys a program needs, each optionally paired
with a Spec. Keys are added at declaration time, before any source is
loaded, and are never removed:

- register(key, spec) inserts or overwrites the spec for key
- require(key) adds key with no spec (presence is checked, shape is not)
- declare(k1, s1, k2, s2, ...) is the batch form of register

Registering the same name twice overwrites the previous spec (last
declaration wins), mirroring how discovery strategies are registered.

Example:
    Declaring keys:
        ```python
        from envguard import specs
        from envguard.registry import Registry

        registry = Registry()
        registry.declare(
            "app.server/http-port", specs.is_int,
            "app.server/domain", specs.is_str,
        )
        registry.require("app.db/url")
        ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
import threading
from typing import Any

from envguard.exceptions import DeclarationError
from envguard.keys import ConfigKey, KeyLike, as_key
from envguard.specs import Spec, as_spec

SpecLike = Spec | type | Callable[[Any], Any]


class Registry:
    """Process-wide set of declared keys and their specs.

    Mutations are atomic; readers get consistent copies.
    """

    def __init__(self) -> None:
        self._specs: dict[ConfigKey, Spec | None] = {}
        self._lock = threading.RLock()

    def register(self, key: KeyLike, spec: SpecLike) -> None:
        """Insert or overwrite the spec associated with key.

        Raises:
            DeclarationError: If key is not valid key syntax.
            TypeError: If spec is not a Spec, type or predicate.
        """
        k = as_key(key)
        s = as_spec(spec)
        with self._lock:
            self._specs[k] = s

    def require(self, key: KeyLike) -> None:
        """Mark key as required without attaching a spec.

        A spec registered earlier for key is kept.

        Raises:
            DeclarationError: If key is not valid key syntax.
        """
        k = as_key(key)
        with self._lock:
            self._specs.setdefault(k, None)

    def declare(self, *pairs: Any) -> None:
        """Register an ordered sequence of key, spec pairs.

        The argument shape is checked before anything is registered, so a
        malformed declaration leaves the registry untouched.

        Args:
            *pairs: key1, spec1, key2, spec2, ...

        Raises:
            DeclarationError: If pairs is empty, has odd length, or a key
                position does not hold a valid key.
        """
        if not pairs or len(pairs) % 2:
            raise DeclarationError(
                f"declare() expects key/spec pairs, got {len(pairs)} argument(s)"
            )
        entries: list[tuple[ConfigKey, Spec]] = []
        for idx in range(0, len(pairs), 2):
            raw_key, raw_spec = pairs[idx], pairs[idx + 1]
            if not isinstance(raw_key, (ConfigKey, str)):
                raise DeclarationError(
                    f"declare() argument {idx} must be a key, got {raw_key!r}"
                )
            try:
                entries.append((as_key(raw_key), as_spec(raw_spec)))
            except TypeError as err:
                raise DeclarationError(
                    f"declare() argument {idx + 1} for {raw_key} is not a spec"
                ) from err
        with self._lock:
            for k, s in entries:
                self._specs[k] = s

    def spec_for(self, key: KeyLike) -> Spec | None:
        """Return the Spec registered for key, or None."""
        with self._lock:
            return self._specs.get(as_key(key))

    def items(self) -> list[tuple[ConfigKey, Spec | None]]:
        """Return a snapshot of (key, spec) pairs in declaration order."""
        with self._lock:
            return list(self._specs.items())

    def keys(self) -> list[ConfigKey]:
        with self._lock:
            return list(self._specs)

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            key = ConfigKey.try_parse(key)
        with self._lock:
            return key in self._specs

    def __len__(self) -> int:
        with self._lock:
            return len(self._specs)

    def __iter__(self) -> Iterator[ConfigKey]:
        return iter(self.keys())
