"""
Pytest configuration and shared fixtures for envguard tests.

This module provides reusable fixtures and test utilities used across
the test suite. Every test gets its own Config so no state leaks between
tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from envguard import specs
from envguard.core import Config
from envguard.logging import SilentLogger


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def config() -> Config:
    """Provide an empty, isolated Config with a silent logger."""
    return Config(logger=SilentLogger())


@pytest.fixture
def server_config(config: Config) -> Config:
    """
    Provide a Config with the keys used by most tests declared.

    - app.server/http-port: integer
    - app.server/domain: string
    """
    config.declare(
        "app.server/http-port", specs.is_int,
        "app.server/domain", specs.is_str,
    )
    return config


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("test.yaml", {"app/key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def init_isolated(tmp_test_dir: Path):
    """
    Factory fixture that initializes a Config without touching the real
    process environment, working directory files or .env file.

    Usage:
        init_isolated(config, environ={"APP___KEY": "1"})
    """

    def _init(cfg: Config, **kwargs: Any) -> None:
        kwargs.setdefault("files", ())
        kwargs.setdefault("environ", {})
        kwargs.setdefault("properties", {})
        cfg.init(**kwargs)

    return _init
