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

"""Best-effort conversion of raw strings into typed values.

Environment-style sources only carry strings. Before a value is stored it
goes through a fallback chain:

1. If the raw string already satisfies the key's spec, keep it as-is.
   This preserves strings for free-form string keys ("0123" stays "0123").
2. Otherwise read it as a YAML literal: "9090" -> 9090, "true" -> True,
   "[a, b]" -> ["a", "b"], "{retries: 3}" -> {"retries": 3}.
3. If that fails, keep the raw string.

Coercion never raises. A value that cannot be converted is stored as a
string and reported later by validation.
"""

from __future__ import annotations

from typing import Any

import yaml

from envguard.specs import Spec

__all__ = ["coerce", "read_literal"]


def read_literal(raw: str) -> tuple[bool, Any]:
    """Parse raw as a YAML literal.

    Args:
        raw: Raw string value.

    Returns:
        A tuple (ok, value), where ok is False when raw is not a parseable
            literal and value is the parsed object when ok is True.
    """
    # Tagged scalars that fail to construct (2001-02-30, !!int abc) raise
    # plain ValueError or TypeError rather than YAMLError.
    try:
        return True, yaml.safe_load(raw)
    except (yaml.YAMLError, ValueError, TypeError, RecursionError):
        return False, None


def coerce(spec: Spec | None, raw: str) -> Any:
    """Convert raw into the value that will be stored for a key.

    Args:
        spec: Spec registered for the key, or None for keys declared with
            require() only.
        raw: Raw string from the source.

    Returns:
        raw itself, the parsed literal, or raw again if parsing failed.
    """
    if spec is None or spec.conforms(raw):
        return raw
    ok, value = read_literal(raw)
    if ok:
        return value
    return raw
