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

"""Mapping between environment-style names and configuration keys.

External names are upper-case tokens of letters, digits and underscores.
Runs of underscores carry the key structure:

    APP__SERVER___HTTP_PORT  <->  app.server/http-port

    ___  <->  /   (namespace separator)
    __   <->  .   (sub-namespace separator)
    _    <->  -   (word separator)

Substitutions are applied longest-first so a run of three underscores is
never read as a dot followed by a dash.

Example:
    Round trip:
        ```python
        from envguard.naming import decode, encode

        key = decode("APP__SERVER___HTTP_PORT")
        str(key)      # "app.server/http-port"
        encode(key)   # "APP__SERVER___HTTP_PORT"
        decode("NOT___A____KEY")  # None
        ```
"""

from __future__ import annotations

import re

from envguard.keys import ConfigKey, KeyLike, as_key

__all__ = ["decode", "encode"]

# Longest match first
_DECODE_STEPS = (("___", "/"), ("__", "."), ("_", "-"))
_ENCODE_STEPS = (("/", "___"), (".", "__"), ("-", "_"))
_EXTERNAL_RE = re.compile(r"[A-Za-z0-9_]+")


def decode(external_name: str) -> ConfigKey | None:
    """Decode an environment-style name into a ConfigKey.

    Args:
        external_name: Name as it appears in the environment
            (e.g., "APP__SERVER___HTTP_PORT").

    Returns:
        The decoded key, or None when the name does not map to valid key
            syntax. Callers treat None as "ignore this entry".
    """
    if not _EXTERNAL_RE.fullmatch(external_name):
        return None
    text = external_name.lower()
    for old, new in _DECODE_STEPS:
        text = text.replace(old, new)
    return ConfigKey.try_parse(text)


def encode(key: KeyLike) -> str:
    """Encode a ConfigKey into its environment-style name.

    Args:
        key: ConfigKey or key text.

    Returns:
        The upper-case external name (e.g., "APP__SERVER___HTTP_PORT").
    """
    text = str(as_key(key))
    for old, new in _ENCODE_STEPS:
        text = text.replace(old, new)
    return text.upper()
