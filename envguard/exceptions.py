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

"""Exception hierarchy for envguard.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- DeclarationError: Malformed key declarations (bad key syntax, odd batch)
- SourceError: A configuration source exists but cannot be read or parsed
- ValidationError: One or more registered keys are missing or malformed

All exceptions inherit from EnvGuardError, allowing users to catch all
envguard errors with a single except clause if needed.

Example:
    Failing startup on bad configuration:
        ```python
        import sys
        import envguard
        from envguard.exceptions import ValidationError

        try:
            envguard.init()
        except ValidationError as e:
            print(e, file=sys.stderr)
            sys.exit(1)
        ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from envguard.validation import ValidationIssue

__all__ = [
    "EnvGuardError",
    "DeclarationError",
    "SourceError",
    "ValidationError",
]


class EnvGuardError(Exception):
    """Base exception for all envguard errors.

    All envguard-specific exceptions inherit from this class, allowing users
    to catch all envguard errors with a single except clause if needed.
    """

    pass


class DeclarationError(EnvGuardError):
    """Raised for malformed key declarations.

    This exception is raised when there are problems with:

    - Key text that does not follow the key syntax (e.g., "App/Port",
        "app/http_port")
    - Batch declarations with an odd number of arguments
    - A non-key value in a key position of a batch declaration
    - Override bindings naming something that is not a key

    Declarations are static program code, so this error is expected at
    import or startup time, never while serving.
    """

    pass


class SourceError(EnvGuardError):
    """Raised when a configuration source is present but unusable.

    This exception is raised when there are problems with:

    - YAML parsing of a configuration file (syntax errors)
    - A configuration file whose top level is not a mapping
    - A configuration file that cannot be read (permissions, encoding)

    A missing file is not an error; it simply contributes nothing.

    Attributes:
        source: Name of the offending source (usually the file path).
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ValidationError(EnvGuardError):
    """Raised when registered keys do not resolve to acceptable values.

    Every registered key is checked before this is raised, so ``issues``
    holds one entry per failing key.

    Attributes:
        issues: One ValidationIssue per missing or non-conforming key.

    Example:
        Inspecting the failing keys:
            ```python
            try:
                config.validate()
            except ValidationError as e:
                for issue in e.issues:
                    print(issue.key, issue.attribution)
            ```
    """

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = list(issues)
        super().__init__(self._render())

    def _render(self) -> str:
        lines = "\n\t".join(issue.describe() for issue in self.issues)
        return (
            "The following configuration keys did not conform to their "
            f"expected values:\n\n\t{lines}\n"
        )
