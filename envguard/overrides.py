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

"""Scoped override bindings.

Overrides shadow stored values for the duration of a ``with`` block (or a
with_override() call) and everything it calls. They live in a
contextvars.ContextVar, so a binding made in one thread or asyncio task is
invisible to every other thread or task.

Nested blocks layer: the inner block sees the outer bindings, and its own
bindings win where keys overlap. Leaving a block, normally or by an
exception, restores exactly the bindings that were active on entry.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
import itertools
from types import MappingProxyType
from typing import Any

from envguard.exceptions import DeclarationError
from envguard.keys import ConfigKey, KeyLike, as_key

_EMPTY: Mapping[ConfigKey, Any] = MappingProxyType({})
_ids = itertools.count()


def normalize_bindings(bindings: Mapping[KeyLike, Any]) -> dict[ConfigKey, Any]:
    """Convert binding keys to ConfigKeys.

    Raises:
        DeclarationError: If bindings is not a mapping or holds a non-key.
    """
    if not isinstance(bindings, Mapping):
        raise DeclarationError(f"override bindings must be a mapping, got {bindings!r}")
    out: dict[ConfigKey, Any] = {}
    for k, v in bindings.items():
        if not isinstance(k, (ConfigKey, str)):
            raise DeclarationError(f"override binding key must be a key, got {k!r}")
        out[as_key(k)] = v
    return out


class OverrideCell:
    """Per-execution-context stack of override bindings."""

    def __init__(self) -> None:
        self._var: ContextVar[Mapping[ConfigKey, Any]] = ContextVar(
            f"envguard_overrides_{next(_ids)}", default=_EMPTY
        )

    def current(self) -> Mapping[ConfigKey, Any]:
        """Return the innermost active bindings (read-only)."""
        return self._var.get()

    @contextmanager
    def push(
        self,
        bindings: Mapping[KeyLike, Any],
        check: Callable[[Mapping[ConfigKey, Any]], None] | None = None,
    ) -> Iterator[Mapping[ConfigKey, Any]]:
        """Layer bindings over the current ones for the block's duration.

        Args:
            bindings: Key to value mapping to make visible.
            check: Called with the combined bindings after they become
                visible and before the block runs. If it raises, the
                bindings are removed and the error propagates.

        Yields:
            The combined bindings.
        """
        combined = MappingProxyType({**self._var.get(), **normalize_bindings(bindings)})
        token = self._var.set(combined)
        try:
            if check is not None:
                check(combined)
            yield combined
        finally:
            self._var.reset(token)

