from __future__ import annotations

from socrata_client import ClientConfig, SocrataClient

from .config import AppConfig, to_settings


def make_client(
    cfg: AppConfig,
    dataset_id: str,
    *,
    profile: str | None,
    domain_override: str | None,
    app_token_override: str | None,
) -> SocrataClient:
    settings = to_settings(cfg, profile)
    return SocrataClient(
        ClientConfig.create(
            dataset_id,
            domain_override,
            app_token_override,
            settings=settings,
        )
    )
