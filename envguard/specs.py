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

"""Value specifications for registered keys.

A Spec is a named predicate. The registry pairs each key with at most one
Spec; the validator asks the Spec to explain a value, and the coercion
layer asks whether a raw string already conforms.

Built-in specs cover the common shapes, and ``all_of`` / ``any_of`` build
composites. Anywhere a spec is accepted, a Python type or a plain
one-argument callable works too (see ``as_spec``).

Example:
    Declaring specs:
        ```python
        from envguard import specs

        port = specs.all_of(specs.is_int, specs.in_range(1, 65535))
        level = specs.one_of("debug", "info", "warning")
        port.conforms(8080)        # True
        port.explain(70000)        # "70000 fails in-range(1, 65535)"
        ```
"""

from __future__ import annotations

from collections.abc import Callable
import re
from typing import Any

__all__ = [
    "Spec",
    "as_spec",
    "all_of",
    "any_of",
    "is_str",
    "is_int",
    "is_float",
    "is_number",
    "is_bool",
    "is_list",
    "is_dict",
    "non_blank",
    "one_of",
    "in_range",
    "matches",
]


class Spec:
    """A named predicate over configuration values.

    Attributes:
        predicate: One-argument callable returning truthy for acceptable values.
        name: Label used in failure messages.

    """

    def __init__(self, predicate: Callable[[Any], Any], name: str | None = None):
        self.predicate = predicate
        self.name = name or getattr(predicate, "__name__", None) or repr(predicate)

    def __repr__(self) -> str:
        return f"Spec({self.name})"

    def conforms(self, value: Any) -> bool:
        """Return True if value satisfies the predicate.

        A predicate that raises is treated as a failed check.
        """
        return self.explain(value) is None

    def explain(self, value: Any, key: object | None = None) -> str | None:
        """Describe why value fails this spec.

        Args:
            value: Value to check.
            key: Optional key to mention in the message.

        Returns:
            None if value conforms, else a human-readable failure message.
        """
        try:
            ok = self.predicate(value)
        except Exception as err:
            return self._message(value, key, f"{self.name} raised {err!r}")
        if ok:
            return None
        return self._message(value, key, self.name)

    @staticmethod
    def _message(value: Any, key: object | None, what: str) -> str:
        if key is None:
            return f"{value!r} fails {what}"
        return f"{value!r} fails {key} predicate: {what}"


class _AllOf(Spec):
    def __init__(self, parts: list[Spec]):
        self.parts = parts
        super().__init__(
            lambda v: all(p.conforms(v) for p in parts),
            "all-of(" + ", ".join(p.name for p in parts) + ")",
        )

    def explain(self, value: Any, key: object | None = None) -> str | None:
        # Report the first failing part, not the whole composite
        for part in self.parts:
            reason = part.explain(value, key)
            if reason is not None:
                return reason
        return None


def as_spec(obj: Spec | type | Callable[[Any], Any]) -> Spec:
    """Normalize a spec-like object into a Spec.

    Args:
        obj: A Spec, a type (checked with isinstance) or a callable predicate.

    Returns:
        A Spec instance.

    Raises:
        TypeError: If obj is none of the accepted forms.
    """
    if isinstance(obj, Spec):
        return obj
    if isinstance(obj, type):
        if obj is int:
            return is_int
        if obj is float:
            return is_float
        return Spec(lambda v: isinstance(v, obj), f"is-{obj.__name__.lower()}")
    if callable(obj):
        return Spec(obj)
    raise TypeError(f"not a spec, type or predicate: {obj!r}")


def all_of(*specs: Spec | type | Callable[[Any], Any]) -> Spec:
    """Spec satisfied when every part is satisfied."""
    return _AllOf([as_spec(s) for s in specs])


def any_of(*specs: Spec | type | Callable[[Any], Any]) -> Spec:
    """Spec satisfied when at least one part is satisfied."""
    parts = [as_spec(s) for s in specs]
    return Spec(
        lambda v: any(p.conforms(v) for p in parts),
        "any-of(" + ", ".join(p.name for p in parts) + ")",
    )


is_str = Spec(lambda v: isinstance(v, str), "is-str")
# bool is a subclass of int; "true" must not pass as a port number
is_int = Spec(lambda v: isinstance(v, int) and not isinstance(v, bool), "is-int")
is_float = Spec(lambda v: isinstance(v, float), "is-float")
is_number = Spec(
    lambda v: isinstance(v, (int, float)) and not isinstance(v, bool), "is-number"
)
is_bool = Spec(lambda v: isinstance(v, bool), "is-bool")
is_list = Spec(lambda v: isinstance(v, list), "is-list")
is_dict = Spec(lambda v: isinstance(v, dict), "is-dict")
non_blank = Spec(lambda v: isinstance(v, str) and bool(v.strip()), "non-blank")


def one_of(*choices: Any) -> Spec:
    """Spec satisfied when the value equals one of choices."""
    return Spec(lambda v: v in choices, f"one-of{choices!r}")


def in_range(lo: float, hi: float) -> Spec:
    """Spec satisfied by numbers with lo <= value <= hi."""
    return Spec(
        lambda v: is_number.conforms(v) and lo <= v <= hi, f"in-range({lo}, {hi})"
    )


def matches(pattern: str) -> Spec:
    """Spec satisfied by strings fully matching the regular expression."""
    rx = re.compile(pattern)
    return Spec(
        lambda v: isinstance(v, str) and rx.fullmatch(v) is not None,
        f"matches({pattern!r})",
    )
