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

"""Core orchestration for envguard.

This module ties the registry, sources, store, validator and overrides
together into a Config object, and exposes a module-level default Config
so small programs can use plain functions.

Lifecycle
---------
1. Declare keys (declare / register / require), usually at import time.
2. init(): load the five sources in their fixed order, then validate.
   A ValidationError here should abort startup.
3. Read values with env(key), env(key, default) or env().
4. Optionally load(source) later to extend the store (re-validates).
5. In tests, override(...) shadows values for one block.

Example:
    Module-level usage:
        ```python
        import envguard
        from envguard import specs

        envguard.declare(
            "app.server/http-port", specs.is_int,
            "app.server/domain", specs.is_str,
        )
        envguard.init()
        port = envguard.env("app.server/http-port")
        ```

    Isolated Config (preferred in tests):
        ```python
        config = Config()
        config.declare("app.server/http-port", int)
        config.init(environ={"APP__SERVER___HTTP_PORT": "9090"}, files=())
        with config.override({"app.server/http-port": 1234}):
            ...
        ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Any, TypeVar

from envguard.keys import ConfigKey, KeyLike, as_key
from envguard.logging import Logger, get_global_logger
from envguard.merge import merge
from envguard.overrides import OverrideCell
from envguard.registry import Registry, SpecLike
from envguard.sources import (
    DEFAULT_DOTENV,
    DEFAULT_FILES,
    RawSource,
    environment_source,
    properties_source,
    read_file_source,
    read_main_file_source,
)
from envguard.store import Provenance, Store
from envguard.validation import OVERRIDE, ValidationIssue, collect_issues, validate

T = TypeVar("T")

_NO_KEY: Any = object()


class Config:
    """One configuration context: registry, store and override scope.

    Attributes:
        registry: Declared keys and their specs.
        store: Merged values and provenance.

    """

    def __init__(self, logger: Logger | None = None) -> None:
        """Create an empty configuration context.

        Args:
            logger: Logger for progress output. When None, the global logger
                is looked up on each call.
        """
        self.registry = Registry()
        self.store = Store()
        self._overrides = OverrideCell()
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    # -------------------------------
    # Declaration
    # -------------------------------

    def declare(self, *pairs: Any) -> None:
        """Register key, spec pairs (see Registry.declare)."""
        self.registry.declare(*pairs)

    def register(self, key: KeyLike, spec: SpecLike) -> None:
        self.registry.register(key, spec)

    def require(self, key: KeyLike) -> None:
        self.registry.require(key)

    # -------------------------------
    # Loading
    # -------------------------------

    def init(
        self,
        *,
        files: Sequence[Path] = DEFAULT_FILES,
        environ: Mapping[str, str] | None = None,
        properties: Mapping[str, str | None] | None = None,
        dotenv_path: Path = DEFAULT_DOTENV,
    ) -> None:
        """Load every source in the fixed order, then validate.

        Order: files (default .envguard.yaml, .envguard.local.yaml), the
        main file named by ENVGUARD__CORE___FILE, the environment, then
        properties.

        Properties are applied last, so a .env file (the default properties
        source) overrides the process environment. This is the reverse of
        python-dotenv's own load_dotenv(override=False); pass properties={}
        to keep the environment authoritative.

        Args:
            files: Local YAML files, lowest precedence first.
            environ: Environment mapping. Defaults to os.environ.
            properties: Properties mapping. Defaults to the values of
                dotenv_path when it exists.
            dotenv_path: .env file used when properties is None.

        Raises:
            SourceError: If a file source exists but is malformed. Sources
                are read before any is merged, so the store is left as is.
            ValidationError: If the merged configuration does not conform.
        """
        logger = self.logger
        env_src = environment_source(environ)

        sources: list[RawSource | None] = [read_file_source(p, logger) for p in files]
        sources.append(read_main_file_source(env_src.entries, logger))
        sources.append(env_src)
        sources.append(properties_source(properties, dotenv_path, logger))

        for source in sources:
            if source is not None:
                merge(self.store, self.registry, source, logger)
        self.validate()

    def load(self, source: RawSource | Mapping[KeyLike, Any], name: str = "load") -> None:
        """Merge one more source on top of the store, then validate.

        Args:
            source: A RawSource, or a mapping of key (text or ConfigKey) to
                value.
            name: Source name used when source is a plain mapping.

        Raises:
            ValidationError: If the configuration no longer conforms. The
                merged values stay in the store.
        """
        if not isinstance(source, RawSource):
            source = RawSource(name, dict(source))
        merge(self.store, self.registry, source, self.logger)
        self.validate()

    def reset(self) -> None:
        """Drop every stored value. Declarations are kept."""
        self.store.clear()

    # -------------------------------
    # Validation
    # -------------------------------

    def issues(self) -> list[ValidationIssue]:
        """Return the current validation failures without raising."""
        return collect_issues(self.registry, self.store, self._overrides.current())

    def validate(self) -> None:
        """Validate the effective configuration (overrides included).

        Raises:
            ValidationError: Listing every failing key.
        """
        validate(self.registry, self.store, self._overrides.current(), self.logger)

    # -------------------------------
    # Reading
    # -------------------------------

    def env(self, key: KeyLike = _NO_KEY, default: Any = None) -> Any:
        """Read configuration.

        Args:
            key: Key to read. When omitted, a snapshot of every effective
                value is returned.
            default: Returned when key has no value.

        Returns:
            The effective value of key, default, or a dict snapshot.
        """
        overrides = self._overrides.current()
        if key is _NO_KEY:
            snapshot = self.store.snapshot()
            snapshot.update(overrides)
            return snapshot
        k = as_key(key)
        if k in overrides:
            return overrides[k]
        return self.store.get(k, default)

    def provenance(self, key: KeyLike) -> Provenance | None:
        """Return where the effective value of key came from."""
        k = as_key(key)
        if k in self._overrides.current():
            return OVERRIDE
        return self.store.provenance_of(k)

    # -------------------------------
    # Overrides
    # -------------------------------

    @contextmanager
    def override(self, bindings: Mapping[KeyLike, Any]) -> Iterator[None]:
        """Shadow values for the duration of a with block.

        The configuration is validated with the new bindings before the
        block runs; on failure the block is skipped and ValidationError
        propagates.

        Raises:
            DeclarationError: If a binding key is not a key.
            ValidationError: If the bindings make the configuration invalid.
        """
        logger = self.logger

        def check(combined: Mapping[ConfigKey, Any]) -> None:
            validate(self.registry, self.store, combined, logger)

        with self._overrides.push(bindings, check) as combined:
            logger.verbose("OVERRIDE", f"Entered with {len(combined)} binding(s)")
            try:
                yield
            finally:
                logger.verbose("OVERRIDE", "Exited")

    def with_override(self, bindings: Mapping[KeyLike, Any], body: Callable[[], T]) -> T:
        """Call body with bindings active and return its result."""
        with self.override(bindings):
            return body()


# -------------------------------
# Module-level default Config
# -------------------------------

_default_config = Config()


def get_config() -> Config:
    """Return the module-level default Config."""
    return _default_config


def set_config(config: Config) -> None:
    """Replace the module-level default Config."""
    global _default_config
    _default_config = config


def declare(*pairs: Any) -> None:
    get_config().declare(*pairs)


def register(key: KeyLike, spec: SpecLike) -> None:
    get_config().register(key, spec)


def require(key: KeyLike) -> None:
    get_config().require(key)


def init(**kwargs: Any) -> None:
    """Initialize the default Config (see Config.init)."""
    get_config().init(**kwargs)


def load(source: RawSource | Mapping[KeyLike, Any], name: str = "load") -> None:
    get_config().load(source, name)


def validate_config() -> None:
    get_config().validate()


def env(*args: Any) -> Any:
    """Read from the default Config: env(), env(key) or env(key, default)."""
    return get_config().env(*args)


def override(bindings: Mapping[KeyLike, Any]) -> AbstractContextManager[None]:
    return get_config().override(bindings)


def with_override(bindings: Mapping[KeyLike, Any], body: Callable[[], T]) -> T:
    return get_config().with_override(bindings, body)
