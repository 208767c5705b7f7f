from __future__ import annotations

from importlib import metadata
from typing import Any, Mapping, NamedTuple

from .config_types import ClientConfig
from .errors import InvalidArgument
from .query import Query

LIBRARY_NAME = "socrata-client"
DEFAULT_FORMAT = "json"
RECORD_FORMATS = ("json", "csv", "tsv", "geojson")


def library_version() -> str:
    try:
        return metadata.version(LIBRARY_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


def user_agent() -> str:
    return f"{LIBRARY_NAME} v{library_version()}"


class PreparedRequest(NamedTuple):
    url: str
    headers: dict[str, str]
    options: dict[str, Any]


def metadata_url(cfg: ClientConfig) -> str:
    return f"https://{cfg.domain}/views/{cfg.dataset_id}.json"


def records_url(cfg: ClientConfig, fmt: str) -> str:
    return f"https://{cfg.domain}/resource/{cfg.dataset_id}.{fmt}"


def resolve_format(fmt: str | None, cfg: ClientConfig) -> str:
    resolved = fmt or cfg.default_format or DEFAULT_FORMAT
    if resolved not in RECORD_FORMATS:
        raise InvalidArgument(
            f"unsupported format {resolved!r}; expected one of {', '.join(RECORD_FORMATS)}"
        )
    return resolved


def build_headers(
        cfg: ClientConfig,
        *,
        app_token: str | None = None,
        overrides: Mapping[str, str] | None = None,
) -> dict[str, str]:
    headers = {"User-Agent": user_agent()}
    token = app_token or cfg.app_token
    if token:
        headers["X-App-Token"] = token

    # caller headers win, regardless of the case they were spelled in
    for name, value in (overrides or {}).items():
        for existing in [k for k in headers if k.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value
    return headers


def prepare_metadata(
        cfg: ClientConfig,
        *,
        app_token: str | None = None,
        headers: Mapping[str, str] | None = None,
        options: Mapping[str, Any] | None = None,
) -> PreparedRequest:
    return PreparedRequest(
        url=metadata_url(cfg),
        headers=build_headers(cfg, app_token=app_token, overrides=headers),
        options=dict(options or {}),
    )


def prepare_records(
        cfg: ClientConfig,
        query: Query | None = None,
        fmt: str | None = None,
        *,
        app_token: str | None = None,
        headers: Mapping[str, str] | None = None,
        options: Mapping[str, Any] | None = None,
) -> PreparedRequest:
    """Build the records request for ``query``.

    The format is checked before anything else so an unsupported one never
    reaches the network. Any ``params`` in ``options`` are replaced by the
    query's parameters.
    """
    resolved = resolve_format(fmt, cfg)
    opts = dict(options or {})
    opts["params"] = query.params() if query is not None else {}
    return PreparedRequest(
        url=records_url(cfg, resolved),
        headers=build_headers(cfg, app_token=app_token, overrides=headers),
        options=opts,
    )
