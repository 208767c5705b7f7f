from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from socrata_client import ClientSettings

APP_NAME = "socrata"
CONFIG_FILENAME = "config.toml"

ENV_DOMAIN = "SOCRATA_DOMAIN"
ENV_APP_TOKEN = "SOCRATA_APP_TOKEN"
ENV_DEFAULT_FORMAT = "SOCRATA_DEFAULT_FORMAT"


@dataclass
class ProfileConfig:
    domain: str = ""
    app_token: str = ""
    default_format: str = ""


@dataclass
class AppConfig:
    domain: str = ""
    app_token: str = ""
    default_format: str = ""
    profiles: dict[str, ProfileConfig] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def _str(value: Any) -> str:
    return str(value or "").strip()


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    data: dict[str, Any] = {
        "domain": cfg.domain,
        "app_token": cfg.app_token,
        "default_format": cfg.default_format,
    }
    data = {k: v for k, v in data.items() if v}
    if cfg.profiles:
        data["profiles"] = {
            name: {k: v for k, v in vars(p).items() if v}
            for name, p in cfg.profiles.items()
        }
    return data


def from_toml(data: dict[str, Any]) -> AppConfig:
    profiles: dict[str, ProfileConfig] = {}
    profiles_raw = data.get("profiles") or {}
    if isinstance(profiles_raw, dict):
        for name, v in profiles_raw.items():
            if not isinstance(v, dict):
                continue
            profiles[str(name)] = ProfileConfig(
                domain=_str(v.get("domain")),
                app_token=_str(v.get("app_token")),
                default_format=_str(v.get("default_format")),
            )
    return AppConfig(
        domain=_str(data.get("domain")),
        app_token=_str(data.get("app_token")),
        default_format=_str(data.get("default_format")),
        profiles=profiles,
    )


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    prof = cfg.profiles.get(profile)
    if prof is None:
        raise KeyError(profile)
    return replace(
        cfg,
        domain=prof.domain or cfg.domain,
        app_token=prof.app_token or cfg.app_token,
        default_format=prof.default_format or cfg.default_format,
    )


def apply_env(cfg: AppConfig) -> AppConfig:
    """Environment variables override file values."""
    return replace(
        cfg,
        domain=os.getenv(ENV_DOMAIN, "").strip() or cfg.domain,
        app_token=os.getenv(ENV_APP_TOKEN, "").strip() or cfg.app_token,
        default_format=os.getenv(ENV_DEFAULT_FORMAT, "").strip() or cfg.default_format,
    )


def to_settings(cfg: AppConfig, profile: str | None = None) -> ClientSettings:
    effective = apply_env(apply_profile(cfg, profile))
    return ClientSettings(
        domain=effective.domain or None,
        app_token=effective.app_token or None,
        default_format=effective.default_format or None,
    )
