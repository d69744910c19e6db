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

"""Readers that turn physical configuration sources into RawSources.

A RawSource is a name plus a flat mapping. Two flavours exist:

- Keyed sources (files): entry names are key text such as
  "app.server/http-port" and values are already structured YAML values.
- Encoded sources (environment, properties): entry names are
  environment-style names such as "APP__SERVER___HTTP_PORT" and values are
  raw strings.

Load Order
----------
Config.init() reads the sources in this fixed order, later ones winning
key by key:

1. .envguard.yaml in the working directory
2. .envguard.local.yaml in the working directory
3. The main file named by ENVGUARD__CORE___FILE, if set
4. The process environment
5. Properties: an explicit mapping, or the values of a .env file

File Format
-----------
A YAML document whose top level is a flat mapping:

    app.server/http-port: 8080
    app.server/domain: example.com

Error Handling
--------------
- A missing file yields None (contributes nothing)
- An empty file yields an empty source
- SourceError: the file cannot be read, is not valid YAML, or its top
  level is not a mapping. Parser errors are chained with "from err".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
import yaml

from envguard.exceptions import SourceError
from envguard.keys import ConfigKey
from envguard.logging import Logger, get_global_logger
from envguard.naming import encode

# Designated name holding the location of the main file
MAIN_FILE_KEY = ConfigKey("envguard.core", "file")
MAIN_FILE_VAR = encode(MAIN_FILE_KEY)

DEFAULT_FILES: tuple[Path, ...] = (
    Path(".envguard.yaml"),
    Path(".envguard.local.yaml"),
)
DEFAULT_DOTENV = Path(".env")

ENVIRONMENT = "environment"
PROPERTIES = "properties"


@dataclass(frozen=True)
class RawSource:
    """One configuration source, read and ready to merge.

    Attributes:
        name: Identifies the source in provenance and error messages.
        entries: Mapping of entry name to value.
        encoded: True if entry names are environment-style names that must
            be decoded; False if they are key text or ConfigKeys.

    """

    name: str
    entries: Mapping[Any, Any] = field(default_factory=dict)
    encoded: bool = False


# -------------------------------
# File sources
# -------------------------------


def read_file_source(path: Path, logger: Logger | None = None) -> RawSource | None:
    """Read a YAML configuration file.

    Args:
        path: Path to the file.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        A keyed RawSource named after the path, or None if the file does
            not exist.

    Raises:
        SourceError: If the file cannot be read or parsed, or its top level
            is not a mapping.
    """
    logger = logger or get_global_logger()
    if not path.is_file():
        logger.debug("SOURCE", f"Not found, skipping: {path}")
        return None
    name = str(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, ValueError, TypeError) as err:
        raise SourceError(f"Error parsing YAML: {path}: {err}", name) from err
    except (OSError, UnicodeDecodeError) as err:
        raise SourceError(f"Error reading file: {path}: {err}", name) from err
    if data is None:
        logger.verbose("SOURCE", f"Loaded {path} (empty)")
        return RawSource(name, {})
    if not isinstance(data, dict):
        raise SourceError(
            f"top-level YAML must be a mapping (dict): {path}", name
        )
    logger.verbose("SOURCE", f"Loaded {path} ({len(data)} entries)")
    return RawSource(name, data)


def resolve_main_file(
    environ: Mapping[str, str], cwd: Path | None = None
) -> Path | None:
    """Return the main file location named in environ, if any.

    Relative locations are resolved against cwd (default: working directory).
    """
    location = environ.get(MAIN_FILE_VAR)
    if not location:
        return None
    p = Path(location)
    if not p.is_absolute():
        p = (cwd or Path.cwd()) / p
    return p


def read_main_file_source(
    environ: Mapping[str, str], logger: Logger | None = None
) -> RawSource | None:
    """Read the main file whose location is given by ENVGUARD__CORE___FILE.

    Returns:
        The file's RawSource, or None when the variable is unset or the
            file does not exist (the latter logs a warning).

    Raises:
        SourceError: If the file exists but is malformed.
    """
    logger = logger or get_global_logger()
    path = resolve_main_file(environ)
    if path is None:
        return None
    if not path.is_file():
        logger.warning("SOURCE", f"{MAIN_FILE_VAR} names a missing file: {path}")
        return None
    return read_file_source(path, logger)


# -------------------------------
# Encoded sources
# -------------------------------


def environment_source(environ: Mapping[str, str] | None = None) -> RawSource:
    """Wrap the process environment (or an explicit mapping) as a source."""
    if environ is None:
        environ = os.environ
    return RawSource(ENVIRONMENT, dict(environ), encoded=True)


def properties_source(
    properties: Mapping[str, str | None] | None = None,
    dotenv_path: Path = DEFAULT_DOTENV,
    logger: Logger | None = None,
) -> RawSource:
    """Build the properties source.

    Args:
        properties: Explicit name to value mapping. When None, the values of
            dotenv_path are used if that file exists.
        dotenv_path: Location of the .env file.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        An encoded RawSource. Entries without a value are dropped.
    """
    logger = logger or get_global_logger()
    name = PROPERTIES
    if properties is None:
        if dotenv_path.is_file():
            properties = dotenv_values(dotenv_path)
            name = f"{PROPERTIES} ({dotenv_path})"
            logger.verbose("SOURCE", f"Loaded {dotenv_path} ({len(properties)} entries)")
        else:
            properties = {}
    entries = {k: v for k, v in properties.items() if v is not None}
    return RawSource(name, entries, encoded=True)
