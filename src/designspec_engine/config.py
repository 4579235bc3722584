"""Runtime settings resolution.

Settings come from environment variables, optionally overlaid by a YAML
file for the non-secret knobs.

Environment variables:
    FIGMA_TOKEN: design API token (required to resolve links)
    GITHUB_TOKEN: token used to read and write the pull request
    PR_NUMBER: pull request number
    GITHUB_REPOSITORY: owner/repo
    DESIGNSPEC_CONFIG: YAML settings file (default: .github/design-specs.yaml)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

import yaml

from designspec_engine import DEFAULT_DESIGN_HOST

DEFAULT_CONFIG_PATH = Path(".github") / "design-specs.yaml"

# Keys accepted in the YAML file, mapped to their expected type
_FILE_KEYS: dict[str, type | tuple[type, ...]] = {
    "design_host": str,
    "figma_api_url": str,
    "github_api_url": str,
    "image_format": str,
    "timeout": (int, float),
}


class MissingConfigError(ValueError):
    """Required settings are absent or unusable. Nothing may be written."""

    def __init__(self, missing: list[str], detail: str | None = None):
        self.missing = missing
        message = detail or f"Missing required environment variables: {', '.join(missing)}"
        super().__init__(message)


@dataclass(frozen=True)
class Settings:
    figma_token: str = ""
    github_token: str = ""
    pr_number: str = ""
    repository: str = ""
    design_host: str = DEFAULT_DESIGN_HOST
    figma_api_url: str = "https://api.figma.com"
    github_api_url: str = "https://api.github.com"
    image_format: str = "png"
    timeout: float = 30.0

    def require(self, *names: str) -> None:
        """Raise MissingConfigError if any of the named settings is empty."""
        env_names = {
            "figma_token": "FIGMA_TOKEN",
            "github_token": "GITHUB_TOKEN",
            "pr_number": "PR_NUMBER",
            "repository": "GITHUB_REPOSITORY",
        }
        missing = [env_names.get(n, n) for n in names if not getattr(self, n)]
        if missing:
            raise MissingConfigError(missing)

    def owner_repo(self) -> tuple[str, str]:
        """Split GITHUB_REPOSITORY into (owner, repo)."""
        owner, _, repo = self.repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise MissingConfigError(
                ["GITHUB_REPOSITORY"],
                f"Could not parse repository info from GITHUB_REPOSITORY: {self.repository!r}",
            )
        return owner, repo


def read_config_file(path: Path | str) -> dict:
    """Read and validate a YAML settings file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed settings dict (only known keys).

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If the file is not a mapping or holds unknown keys.
    """
    config_path = Path(path)
    with open(config_path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path} is not a YAML mapping")

    unknown = sorted(set(data) - set(_FILE_KEYS))
    if unknown:
        raise ValueError(f"{config_path}: unknown settings {', '.join(unknown)}")

    for key, value in data.items():
        if not isinstance(value, _FILE_KEYS[key]) or isinstance(value, bool):
            raise ValueError(f"{config_path}: '{key}' has invalid value {value!r}")

    return data


def load_settings(
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
) -> Settings:
    """Build Settings from the environment and an optional YAML file.

    An explicit config_path (or DESIGNSPEC_CONFIG) must exist; the default
    location is only used when present.
    """
    env = os.environ if env is None else env

    settings = Settings(
        figma_token=env.get("FIGMA_TOKEN", ""),
        github_token=env.get("GITHUB_TOKEN", ""),
        pr_number=env.get("PR_NUMBER", ""),
        repository=env.get("GITHUB_REPOSITORY", ""),
    )

    explicit = config_path or env.get("DESIGNSPEC_CONFIG")
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise MissingConfigError(["DESIGNSPEC_CONFIG"], f"Config file not found: {path}")
    elif DEFAULT_CONFIG_PATH.is_file():
        path = DEFAULT_CONFIG_PATH
    else:
        return settings

    overrides = read_config_file(path)
    if "timeout" in overrides:
        overrides["timeout"] = float(overrides["timeout"])
    return replace(settings, **overrides)
