"""Configuration management for the Finnotech SDK and CLI.

Loads credentials from .env and environment base URLs from environments.yaml.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_ENVIRONMENTS = {
    "sandbox": "https://sandboxapi.finnotech.ir",
    "production": "https://apibeta.finnotech.ir",
}


class EnvironmentProfile(BaseModel):
    """A single Finnotech environment."""
    base_url: str


class Settings(BaseModel):
    """Application settings loaded from environment variables."""
    client_id: str = Field(description="Finnotech client ID")
    client_secret: str = Field(description="Finnotech client secret")
    nid: str = Field(description="National ID registered for the client")
    environment: str = Field(default="sandbox", description="Environment name from environments.yaml")
    timeout: float = Field(default=30.0, description="HTTP timeout in seconds")
    token_store: str = Field(default="./.finnotech/tokens.json", description="Token file used by the CLI")


class Config(BaseModel):
    """Full application configuration."""
    settings: Settings
    environments: dict[str, EnvironmentProfile]

    def get_environment(self, name: str | None = None) -> EnvironmentProfile:
        """Get an environment profile by name (defaults to settings.environment)."""
        name = (name or self.settings.environment).lower()
        if name not in self.environments:
            available = ", ".join(sorted(self.environments.keys()))
            raise ValueError(f"Unknown environment '{name}'. Available: {available}")
        return self.environments[name]


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where config/ lives)."""
    current = Path(__file__).resolve().parent
    for parent in [current, *current.parents]:
        if (parent / "config" / "environments.yaml").exists():
            return parent
    return Path.cwd()


def _load_environments(project_root: Path) -> dict[str, EnvironmentProfile]:
    """Load environment profiles from environments.yaml, or the built-in defaults."""
    path = project_root / "config" / "environments.yaml"
    if not path.exists():
        return {
            name: EnvironmentProfile(base_url=url)
            for name, url in DEFAULT_ENVIRONMENTS.items()
        }

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    environments = {}
    for name, profile_data in data.get("environments", {}).items():
        environments[name.lower()] = EnvironmentProfile(**profile_data)
    return environments


def _env(*keys: str, default: str = "") -> str:
    """Try multiple env var names, return the first one found."""
    for key in keys:
        val = os.environ.get(key, "")
        if val:
            return val.strip().strip('"')
    return default


def _load_settings() -> Settings:
    """Load settings from environment variables.

    Supports both FINNOTECH_* and camelCase names from .env.
    """
    return Settings(
        client_id=_env("FINNOTECH_CLIENT_ID", "clientId"),
        client_secret=_env("FINNOTECH_CLIENT_SECRET", "clientSecret"),
        nid=_env("FINNOTECH_NID", "nid"),
        environment=_env("FINNOTECH_ENV", default="sandbox"),
        timeout=float(_env("FINNOTECH_TIMEOUT", default="30")),
        token_store=_env("FINNOTECH_TOKEN_STORE", default="./.finnotech/tokens.json"),
    )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load and cache the full application configuration."""
    project_root = _find_project_root()

    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    settings = _load_settings()
    environments = _load_environments(project_root)

    return Config(settings=settings, environments=environments)
