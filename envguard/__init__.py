"""
envguard - declared, validated runtime configuration

envguard lets a program declare the configuration keys it needs and the
shape of each value, gathers values from layered sources, and refuses to
start when anything required is missing or malformed.

envguard provides:
  - Hierarchical keys (app.server/http-port) with a one-to-one mapping to
    environment-style names (APP__SERVER___HTTP_PORT)
  - Layered loading from YAML files, a main file, the environment and a
    .env properties file, last source wins
  - Best-effort coercion of environment strings into typed values
  - Validation that reports every failing key at once, with the source
    that set it
  - Scoped overrides for tests, visible only to the current thread or task

Quick Start
-----------
    import envguard
    from envguard import specs

    envguard.declare(
        "app.server/http-port", specs.is_int,
        "app.server/domain", specs.non_blank,
    )
    envguard.init()

    port = envguard.env("app.server/http-port")

Package Structure
-----------------
core : module
    Config object and module-level API.
keys, naming : modules
    ConfigKey and the environment-name mapping.
specs, registry : modules
    Value specifications and declared keys.
coercion, sources, merge, store : modules
    Reading, converting and merging sources.
validation, overrides : modules
    Validation and scoped overrides.

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "Declared, validated runtime configuration"

from envguard.core import (
    Config,
    declare,
    env,
    get_config,
    init,
    load,
    override,
    register,
    require,
    set_config,
    validate_config,
    with_override,
)
from envguard.exceptions import (
    DeclarationError,
    EnvGuardError,
    SourceError,
    ValidationError,
)
from envguard.keys import ConfigKey
from envguard.naming import decode, encode
from envguard.sources import RawSource
from envguard.specs import Spec

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "Config",
    "ConfigKey",
    "RawSource",
    "Spec",
    "declare",
    "register",
    "require",
    "init",
    "load",
    "env",
    "override",
    "with_override",
    "validate_config",
    "get_config",
    "set_config",
    "decode",
    "encode",
    "EnvGuardError",
    "DeclarationError",
    "SourceError",
    "ValidationError",
]
