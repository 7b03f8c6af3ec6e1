"""Directory domain configuration: where accounts and groups are read from."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from GroupQuery.config.common import (
    expect_optional_str,
    expect_str,
    get_optional_value,
    get_required_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class DirectoryConfig:
    """Store the validated directory location.

    Attributes:
        path: Effective directory file path.
        path_env: Environment variable that overrides ``path`` when set.
    """

    path: str
    path_env: str | None


def load_directory(raw: Mapping[str, Any]) -> DirectoryConfig:
    """Load the ``directory`` section, applying the ``path_env`` override.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "directory", required=True)
    path = expect_str(get_required_value(section, "path", "directory.path"), "directory.path")
    path_env = expect_optional_str(get_optional_value(section, "path_env", None), "directory.path_env")
    if path_env:
        path = os.getenv(path_env) or path
    return DirectoryConfig(path=path, path_env=path_env)


def check_directory(config: DirectoryConfig) -> None:
    if not config.path.strip():
        raise ValueError("directory.path must not be empty")
