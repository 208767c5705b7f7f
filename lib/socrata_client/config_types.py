from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgument


@dataclass(frozen=True)
class ClientSettings:
    """Process-wide defaults consulted when a client is created."""

    domain: str | None = None
    app_token: str | None = None
    default_format: str | None = None


@dataclass(frozen=True)
class ClientConfig:
    dataset_id: str
    domain: str
    app_token: str | None = None
    default_format: str | None = None

    @classmethod
    def create(
            cls,
            dataset_id: str,
            domain: str | None = None,
            app_token: str | None = None,
            *,
            default_format: str | None = None,
            settings: ClientSettings | None = None,
    ) -> ClientConfig:
        """Resolve explicit arguments against ``settings``.

        An explicit, non-empty argument wins; otherwise the settings value is
        used. The result is fixed for the lifetime of the config.
        """
        settings = settings or ClientSettings()
        if not isinstance(dataset_id, str) or not dataset_id.strip():
            raise InvalidArgument("dataset_id must be a non-empty string")

        resolved_domain = normalize_domain(_pick(domain, settings.domain))
        if not resolved_domain:
            raise InvalidArgument("domain is not configured")

        return cls(
            dataset_id=dataset_id.strip(),
            domain=resolved_domain,
            app_token=_pick(app_token, settings.app_token),
            default_format=_pick(default_format, settings.default_format),
        )


def _pick(explicit: str | None, fallback: str | None) -> str | None:
    value = (explicit or "").strip()
    if value:
        return value
    value = (fallback or "").strip()
    return value or None


def normalize_domain(raw: str | None) -> str:
    value = (raw or "").strip()
    lowered = value.lower()
    for scheme in ("https://", "http://"):
        if lowered.startswith(scheme):
            value = value[len(scheme):]
            break
    return value.rstrip("/")
