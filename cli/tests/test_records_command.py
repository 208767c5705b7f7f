from __future__ import annotations

import httpx
from typer.testing import CliRunner

from socrata_client import ClientConfig
from socrata_cli import config, main
from socrata_cli.commands import records_cmd


class _FakeClient:
    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None):
        self.config = ClientConfig.create("yama-9had", "data.cityofchicago.org")
        self.response = response or httpx.Response(200, text="[]")
        self.error = error
        self.calls: list[tuple] = []
        self.closed = False

    def get_metadata(self, **options):  # noqa: ANN003
        self.calls.append(("metadata", options))
        if self.error:
            raise self.error
        return self.response

    def get_records(self, query, fmt, **options):  # noqa: ANN001, ANN003
        self.calls.append(("records", query, fmt, options))
        if self.error:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def _patch_client(monkeypatch, fake: _FakeClient) -> None:
    monkeypatch.setattr(records_cmd, "make_client", lambda *args, **kwargs: fake)
    monkeypatch.setattr(records_cmd, "load_config", lambda: object())


def _clear_env(monkeypatch) -> None:
    for name in (config.ENV_DOMAIN, config.ENV_APP_TOKEN, config.ENV_DEFAULT_FORMAT):
        monkeypatch.delenv(name, raising=False)


def test_records_builds_query_from_flags(monkeypatch) -> None:
    fake = _FakeClient(httpx.Response(200, text="name,location\nfoo,bar\n"))
    _patch_client(monkeypatch, fake)

    result = CliRunner().invoke(
        main.app,
        [
            "records",
            "yama-9had",
            "--select", "name",
            "--select", "location",
            "--where", "height >= 1000",
            "--limit", "5",
            "--offset", "10",
            "--bom",
            "--filter", "ward=42",
            "--format", "csv",
            "--timeout", "60",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "name,location" in result.output
    assert fake.closed
    kind, query, fmt, options = fake.calls[0]
    assert kind == "records"
    assert fmt == "csv"
    assert options == {"timeout": 60.0}
    assert query.state == {
        "ward": "42",
        "$select": "name, location",
        "$where": "height >= 1000",
        "$limit": 5,
        "$offset": 10,
        "$$bom": True,
    }


def test_records_pretty_prints_json(monkeypatch) -> None:
    fake = _FakeClient(httpx.Response(200, text='[{"beat": "0412"}]'))
    _patch_client(monkeypatch, fake)

    result = CliRunner().invoke(main.app, ["records", "yama-9had"])

    assert result.exit_code == 0, result.output
    assert '"beat": "0412"' in result.output
    _, query, fmt, options = fake.calls[0]
    assert query.state == {}
    assert fmt is None
    assert options == {}


def test_metadata_prints_body(monkeypatch) -> None:
    fake = _FakeClient(httpx.Response(200, text='{"name": "Crimes"}'))
    _patch_client(monkeypatch, fake)

    result = CliRunner().invoke(main.app, ["metadata", "yama-9had"])

    assert result.exit_code == 0, result.output
    assert '"name": "Crimes"' in result.output
    assert fake.calls == [("metadata", {})]


def test_error_status_exits_nonzero(monkeypatch) -> None:
    fake = _FakeClient(httpx.Response(404, text='{"message": "not found"}'))
    _patch_client(monkeypatch, fake)

    result = CliRunner().invoke(main.app, ["metadata", "yama-9had"])

    assert result.exit_code == 1
    assert "HTTP 404" in result.output


def test_transport_failure_exits_nonzero(monkeypatch) -> None:
    fake = _FakeClient(error=httpx.ConnectError("connection refused"))
    _patch_client(monkeypatch, fake)

    result = CliRunner().invoke(main.app, ["records", "yama-9had"])

    assert result.exit_code == 1
    assert "Request failed" in result.output
    assert fake.closed


def test_invalid_filter_is_rejected(monkeypatch) -> None:
    fake = _FakeClient()
    _patch_client(monkeypatch, fake)

    result = CliRunner().invoke(main.app, ["records", "yama-9had", "--filter", "novalue"])

    assert result.exit_code == 2
    assert "expected KEY=VALUE" in result.output
    assert fake.calls == []


def test_unsupported_format_is_rejected(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setattr(records_cmd, "load_config", lambda: config.AppConfig(domain="data.example"))

    result = CliRunner().invoke(main.app, ["records", "yama-9had", "--format", "xml"])

    assert result.exit_code == 2
    assert "unsupported format" in result.output


def test_missing_domain_is_reported(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setattr(records_cmd, "load_config", config.default_config)

    result = CliRunner().invoke(main.app, ["metadata", "yama-9had"])

    assert result.exit_code == 2
    assert "domain is not configured" in result.output


def test_unknown_profile_is_reported(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setattr(records_cmd, "load_config", lambda: config.AppConfig(domain="data.example"))

    result = CliRunner().invoke(main.app, ["metadata", "yama-9had", "--profile", "nope"])

    assert result.exit_code == 2
    assert "Unknown profile: nope" in result.output
