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

"""Hierarchical configuration keys.

A key has an optional namespace and a name, written ``namespace/name``:

    app.server/http-port
    ^^^^^^^^^^ ^^^^^^^^^
    namespace  name

Namespaces are dot-separated segments; a segment is dash-separated
lower-case words. Underscores and upper-case letters are never part of a
key, which keeps the mapping to environment-style names one-to-one (see
envguard.naming).
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from envguard.exceptions import DeclarationError

# A segment: words of [a-z0-9], first word starts with a letter, single dashes.
_SEGMENT = r"[a-z][a-z0-9]*(?:-[a-z0-9]+)*"
_KEY_RE = re.compile(rf"(?:(?P<ns>{_SEGMENT}(?:\.{_SEGMENT})*)/)?(?P<name>{_SEGMENT})")


@dataclass(frozen=True)
class ConfigKey:
    """Immutable namespace + name pair addressing one configuration value.

    Attributes:
        namespace: Dotted namespace (e.g., "app.server"), or None.
        name: Dashed name (e.g., "http-port").

    """

    namespace: str | None
    name: str

    def __post_init__(self) -> None:
        text = self._text()
        if not _KEY_RE.fullmatch(text):
            raise DeclarationError(f"invalid configuration key: {text!r}")

    def _text(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}/{self.name}"

    def __str__(self) -> str:
        return self._text()

    @classmethod
    def parse(cls, text: str) -> ConfigKey:
        """Parse key text such as ``"app.server/http-port"``.

        Raises:
            DeclarationError: If text is not a string or not valid key syntax.
        """
        key = cls.try_parse(text)
        if key is None:
            raise DeclarationError(f"invalid configuration key: {text!r}")
        return key

    @classmethod
    def try_parse(cls, text: object) -> ConfigKey | None:
        """Parse key text, returning None instead of raising."""
        if not isinstance(text, str):
            return None
        m = _KEY_RE.fullmatch(text)
        if m is None:
            return None
        return cls(m.group("ns"), m.group("name"))


KeyLike = ConfigKey | str


def as_key(key: KeyLike) -> ConfigKey:
    """Return key as a ConfigKey, parsing key text when needed.

    Raises:
        DeclarationError: If key is neither a ConfigKey nor valid key text.
    """
    if isinstance(key, ConfigKey):
        return key
    return ConfigKey.parse(key)
