from __future__ import annotations

import typer

from socrata_client import RECORD_FORMATS
from socrata_client.config_types import normalize_domain

from .. import console
from ..config import ProfileConfig, config_path, load_config, save_config

app = typer.Typer(help="Manage local settings (~/.config/socrata/config.toml).")

KEYS = ("domain", "app_token", "default_format")


@app.command("show")
def show_settings(
        profile: str | None = typer.Option(None, "--profile", "-p", help="Show a profile instead."),
):
    cfg = load_config()
    target = cfg
    if profile:
        target = cfg.profiles.get(profile)
        if target is None:
            console.err(f"Unknown profile: {profile}")
            raise typer.Exit(code=2)
    token_state = "(set)" if target.app_token else "(empty)"
    console.console.print(
        f"path={config_path()} domain={target.domain or '(empty)'} app_token={token_state} "
        f"default_format={target.default_format or '(empty)'}"
    )


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (domain, app_token, default_format)."),
        profile: str | None = typer.Option(None, "--profile", "-p", help="Read from a profile instead."),
):
    cfg = load_config()
    k = key.strip().lower()
    if k not in KEYS:
        console.err(f"Unknown setting: {key}")
        raise typer.Exit(code=2)
    target = cfg
    if profile:
        target = cfg.profiles.get(profile)
        if target is None:
            console.err(f"Unknown profile: {profile}")
            raise typer.Exit(code=2)
    console.console.print(getattr(target, k))


@app.command("set")
def set_setting(
        domain: str | None = typer.Option(None, "--domain", help="Default Socrata domain."),
        app_token: str | None = typer.Option(None, "--app-token", help="Default app token."),
        default_format: str | None = typer.Option(None, "--default-format", help="Default records format."),
        profile: str | None = typer.Option(None, "--profile", "-p", help="Write into this profile."),
):
    if default_format is not None and default_format.strip() and default_format.strip() not in RECORD_FORMATS:
        console.err(f"Unsupported format '{default_format}'. Use one of: {', '.join(RECORD_FORMATS)}.")
        raise typer.Exit(code=2)

    cfg = load_config()
    target = cfg
    if profile:
        target = cfg.profiles.setdefault(profile, ProfileConfig())
    if domain is not None:
        target.domain = normalize_domain(domain)
    if app_token is not None:
        target.app_token = app_token.strip()
    if default_format is not None:
        target.default_format = default_format.strip()
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
