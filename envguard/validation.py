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

"""Validation of the effective configuration against the registry.

Every registered key is checked, with no early exit:

- The effective value is the override binding if present, else the stored
  value, else absent.
- Keys with a spec fail when absent or when the spec rejects the value.
- Keys declared with require() only fail when absent.

All failures are collected into one ValidationError. Each issue carries a
human-readable attribution so operators can find what they set:

- set by override
- APP__SERVER___HTTP_PORT from environment   (name-encoded sources)
- app.server/http-port from .envguard.yaml   (file sources)
- declared, never set

Example:
    Reporting all failures at once:
        ```python
        from envguard.validation import collect_issues

        for issue in collect_issues(registry, store):
            print(issue.describe())
        ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from envguard.exceptions import ValidationError
from envguard.keys import ConfigKey
from envguard.logging import Logger, get_global_logger
from envguard.naming import encode
from envguard.registry import Registry
from envguard.store import Provenance, Store

__all__ = [
    "MISSING",
    "OVERRIDE",
    "NEVER_SET",
    "ValidationIssue",
    "attribution",
    "collect_issues",
    "validate",
]


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

OVERRIDE = Provenance("override")
NEVER_SET = "declared, never set"


def attribution(key: ConfigKey, origin: Provenance | None) -> str:
    """Describe where the value of key came from, for error messages."""
    if origin is None:
        return NEVER_SET
    if origin == OVERRIDE:
        return "set by override"
    if origin.external_name is not None:
        return f"{encode(key)} from {origin.source}"
    return f"{key} from {origin.source}"


@dataclass(frozen=True)
class ValidationIssue:
    """One missing or non-conforming key.

    Attributes:
        key: The failing key.
        value: The effective value, or MISSING.
        message: Why the value was rejected.
        provenance: Where the value came from, or None if never set.

    """

    key: ConfigKey
    value: Any
    message: str
    provenance: Provenance | None

    @property
    def attribution(self) -> str:
        return attribution(self.key, self.provenance)

    def describe(self) -> str:
        return f"{self.message} ({self.attribution})"


def collect_issues(
    registry: Registry,
    store: Store,
    overrides: Mapping[ConfigKey, Any] | None = None,
) -> list[ValidationIssue]:
    """Check every registered key and return the failures.

    Args:
        registry: Declared keys and specs.
        store: Merged values and provenance.
        overrides: Active override bindings (take precedence over store).

    Returns:
        One ValidationIssue per failing key, in declaration order.
    """
    overrides = overrides or {}
    records = store.records()
    issues: list[ValidationIssue] = []

    for key, spec in registry.items():
        if key in overrides:
            value, origin = overrides[key], OVERRIDE
        elif key in records:
            value, origin = records[key]
        else:
            value, origin = MISSING, None

        if value is MISSING:
            issues.append(
                ValidationIssue(key, MISSING, f"{key} is required but missing", None)
            )
            continue
        if spec is None:
            continue
        reason = spec.explain(value, key)
        if reason is not None:
            issues.append(ValidationIssue(key, value, reason, origin))

    return issues


def validate(
    registry: Registry,
    store: Store,
    overrides: Mapping[ConfigKey, Any] | None = None,
    logger: Logger | None = None,
) -> None:
    """Validate the effective configuration.

    Raises:
        ValidationError: If any registered key is missing or rejected. The
            error lists every failing key.
    """
    logger = logger or get_global_logger()
    issues = collect_issues(registry, store, overrides)
    if issues:
        for issue in issues:
            logger.debug("VALIDATE", issue.describe())
        raise ValidationError(issues)
    logger.verbose("VALIDATE", f"All {len(registry)} key(s) conform")
