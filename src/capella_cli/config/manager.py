"""Profile storage: reads and writes the TOML config and resolves the active profile."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomli_w

from capella_cli.client.errors import ConfigurationError
from capella_cli.config.constants import (
    CONFIG_FILE,
    DEFAULT_HOST,
    ENV_API_TOKEN,
    ENV_HOST,
    ENV_PROFILE,
)
from capella_cli.config.models import CapellaProfile, CLIConfig

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

_PROFILE_DEFAULTS = {
    name: field.default
    for name, field in CapellaProfile.model_fields.items()
    if name not in ("name", "token")
}


class ConfigManager:
    """Manages CLI configuration on disk and resolves connection profiles."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or CONFIG_FILE
        self._config: CLIConfig | None = None

    @property
    def config(self) -> CLIConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> CLIConfig:
        if not self.config_path.exists():
            return CLIConfig()
        raw = self.config_path.read_bytes()
        try:
            data = tomllib.loads(raw.decode())
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Cannot parse {self.config_path}: {exc}") from exc
        profiles: dict[str, CapellaProfile] = {}
        for name, prof_data in data.get("profiles", {}).items():
            profiles[name] = CapellaProfile(name=name, **prof_data)
        return CLIConfig(
            default_profile=data.get("default_profile"),
            default_format=data.get("default_format", "table"),
            profiles=profiles,
        )

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        # Secure directory permissions (owner-only)
        os.chmod(self.config_path.parent, 0o700)
        data: dict[str, Any] = {}
        if self.config.default_profile:
            data["default_profile"] = self.config.default_profile
        if self.config.default_format != "table":
            data["default_format"] = self.config.default_format
        if self.config.profiles:
            data["profiles"] = {}
            for name, profile in self.config.profiles.items():
                prof_dict = profile.model_dump(exclude={"name"}, exclude_none=True)
                # Remove defaults to keep config clean
                for key, default in _PROFILE_DEFAULTS.items():
                    if prof_dict.get(key) == default:
                        del prof_dict[key]
                data["profiles"][name] = prof_dict
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.replace(self.config_path)

    def add_profile(self, profile: CapellaProfile) -> None:
        self.config.profiles[profile.name] = profile
        if not self.config.default_profile:
            self.config.default_profile = profile.name
        self.save()

    def remove_profile(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        del self.config.profiles[name]
        if self.config.default_profile == name:
            self.config.default_profile = next(iter(self.config.profiles), None)
        self.save()
        return True

    def set_default(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        self.config.default_profile = name
        self.save()
        return True

    def get_profile(self, name: str | None = None) -> CapellaProfile | None:
        if name:
            return self.config.profiles.get(name)
        default = self.config.default_profile
        if default:
            return self.config.profiles.get(default)
        return None

    def resolve_profile(
        self,
        profile_name: str | None = None,
        host: str | None = None,
        token: str | None = None,
    ) -> CapellaProfile:
        """Resolve the Capella connection.

        Precedence: CLI flags > env vars > config profile > built-in defaults.
        """
        env_profile = os.environ.get(ENV_PROFILE)
        wanted = profile_name or env_profile
        profile = self.get_profile(wanted)
        if wanted and profile is None:
            raise ConfigurationError(f"Profile '{wanted}' not found.")

        env_host = os.environ.get(ENV_HOST)
        env_token = os.environ.get(ENV_API_TOKEN)

        resolved_host = host or env_host or (profile.host_url if profile else DEFAULT_HOST)
        resolved_token = token or env_token or (profile.token if profile else None)

        if not resolved_token:
            raise ConfigurationError(
                "No API token configured. Use 'capella-cli config add' or set "
                f"{ENV_API_TOKEN} or pass --token."
            )

        base = profile.model_dump(exclude={"name", "host_url", "token"}) if profile else {}
        return CapellaProfile(
            name=profile.name if profile else "cli",
            host_url=resolved_host,
            token=resolved_token,
            **base,
        )
