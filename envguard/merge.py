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

"""Folding a RawSource into the Store.

For every entry of the source:

1. Resolve the entry name to a key (decode for encoded sources, parse key
   text for keyed sources). Names that do not resolve are dropped.
2. Drop keys that are not registered.
3. Coerce raw strings from encoded sources against the key's spec.
4. Write value and provenance.

Merge behavior is "last wins" per key: values are replaced, never deep
merged, and provenance always names the last writer. The whole source is
applied in one Store update.
"""

from __future__ import annotations

from typing import Any

from envguard.coercion import coerce
from envguard.keys import ConfigKey
from envguard.logging import Logger, get_global_logger
from envguard.naming import decode
from envguard.registry import Registry
from envguard.sources import RawSource
from envguard.store import Provenance, Store

__all__ = ["merge"]


def _resolve_name(name: Any, encoded: bool) -> ConfigKey | None:
    if isinstance(name, ConfigKey):
        return name
    if not isinstance(name, str):
        return None
    if encoded:
        return decode(name)
    return ConfigKey.try_parse(name)


def merge(
    store: Store,
    registry: Registry,
    source: RawSource,
    logger: Logger | None = None,
) -> list[ConfigKey]:
    """Merge one source into store.

    Args:
        store: Store to write into.
        registry: Registry used to filter and coerce entries.
        source: The source to merge.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        The keys written, in source order.
    """
    logger = logger or get_global_logger()
    staged: list[tuple[ConfigKey, Any, Provenance]] = []
    dropped = 0

    for name, raw in source.entries.items():
        key = _resolve_name(name, source.encoded)
        if key is None or key not in registry:
            dropped += 1
            continue
        value = raw
        if source.encoded and isinstance(raw, str):
            value = coerce(registry.spec_for(key), raw)
        origin = Provenance(source.name, name if source.encoded else None)
        staged.append((key, value, origin))
        logger.debug("MERGE", f"{key} <- {source.name}")

    store.update(staged)
    logger.verbose(
        "MERGE",
        f"Merged {len(staged)} key(s) from {source.name} ({dropped} ignored)",
    )
    return [key for key, _, _ in staged]
