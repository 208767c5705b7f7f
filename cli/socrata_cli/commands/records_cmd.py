from __future__ import annotations

from typing import Any

import httpx
import typer

from socrata_client import InvalidArgument, Query, SocrataClient, TransportFailure

from .. import console
from ..config import load_config
from ..http import make_client

DOMAIN_OPT = typer.Option(None, "--domain", "-d", help="Socrata domain, e.g. data.cityofchicago.org.")
TOKEN_OPT = typer.Option(None, "--app-token", help="App token sent as X-App-Token.")
PROFILE_OPT = typer.Option(None, "--profile", "-p", help="Config profile to use.")
TIMEOUT_OPT = typer.Option(None, "--timeout", help="Request timeout in seconds.")


def _client_or_exit(
        dataset_id: str,
        *,
        domain: str | None,
        app_token: str | None,
        profile: str | None,
) -> SocrataClient:
    try:
        return make_client(
            load_config(),
            dataset_id,
            profile=profile,
            domain_override=domain,
            app_token_override=app_token,
        )
    except KeyError:
        console.err(f"Unknown profile: {profile}")
        raise typer.Exit(code=2)
    except InvalidArgument as e:
        console.err(str(e))
        raise typer.Exit(code=2)


def _parse_filters(items: list[str] | None) -> dict[str, str]:
    filters: dict[str, str] = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            console.err(f"Invalid filter '{item}', expected KEY=VALUE.")
            raise typer.Exit(code=2)
        filters[key.strip()] = value
    return filters


def build_query(
        *,
        select: list[str] | None = None,
        where: str | None = None,
        order: str | None = None,
        group: str | None = None,
        having: str | None = None,
        q: str | None = None,
        query: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        bom: bool = False,
        filters: dict[str, str] | None = None,
) -> Query:
    built = Query()
    for key, value in (filters or {}).items():
        built = built.filter(key, value)
    if select:
        built = built.select(select)
    if where:
        built = built.where(where)
    if order:
        built = built.order(order)
    if group:
        built = built.group(group)
    if having:
        built = built.having(having)
    if q:
        built = built.q(q)
    if query:
        built = built.query(query)
    if limit is not None:
        built = built.limit(limit)
    if offset is not None:
        built = built.offset(offset)
    if bom:
        built = built.ensure_bom()
    return built


def _send(call, *args: Any, **kwargs: Any) -> httpx.Response:
    try:
        return call(*args, **kwargs)
    except InvalidArgument as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    except TransportFailure as e:
        console.err(f"Request failed: {e}")
        raise typer.Exit(code=1)


def _render(resp: httpx.Response, fmt: str) -> None:
    body = resp.text
    if fmt in ("json", "geojson"):
        try:
            console.print_json(body)
        except ValueError:
            console.write_raw(body)
    else:
        console.write_raw(body)

    if resp.status_code >= 400:
        console.warn(f"Server responded with HTTP {resp.status_code}.")
        raise typer.Exit(code=1)


def metadata(
        dataset_id: str = typer.Argument(..., help="Data set identifier, e.g. yama-9had."),
        domain: str | None = DOMAIN_OPT,
        app_token: str | None = TOKEN_OPT,
        profile: str | None = PROFILE_OPT,
        timeout: float | None = TIMEOUT_OPT,
) -> None:
    """Print a data set's metadata."""
    options: dict[str, Any] = {}
    if timeout is not None:
        options["timeout"] = timeout

    client = _client_or_exit(dataset_id, domain=domain, app_token=app_token, profile=profile)
    try:
        resp = _send(client.get_metadata, **options)
    finally:
        client.close()
    _render(resp, "json")


def records(
        dataset_id: str = typer.Argument(..., help="Data set identifier, e.g. yama-9had."),
        fmt: str | None = typer.Option(None, "--format", "-f", help="json, csv, tsv or geojson."),
        select: list[str] | None = typer.Option(None, "--select", "-s", help="Column to select (repeatable)."),
        where: str | None = typer.Option(None, "--where", help="SoQL $where expression."),
        order: str | None = typer.Option(None, "--order", help="SoQL $order expression."),
        group: str | None = typer.Option(None, "--group", help="SoQL $group expression."),
        having: str | None = typer.Option(None, "--having", help="SoQL $having expression."),
        q: str | None = typer.Option(None, "--q", help="Full text search."),
        query: str | None = typer.Option(None, "--query", help="Complete SoQL query."),
        limit: int | None = typer.Option(None, "--limit", "-n", help="Maximum number of rows."),
        offset: int | None = typer.Option(None, "--offset", help="Rows to skip."),
        bom: bool = typer.Option(False, "--bom", help="Request a byte order mark."),
        filters: list[str] | None = typer.Option(None, "--filter", help="Equality filter KEY=VALUE (repeatable)."),
        domain: str | None = DOMAIN_OPT,
        app_token: str | None = TOKEN_OPT,
        profile: str | None = PROFILE_OPT,
        timeout: float | None = TIMEOUT_OPT,
) -> None:
    """Print records of a data set."""
    built = build_query(
        select=select,
        where=where,
        order=order,
        group=group,
        having=having,
        q=q,
        query=query,
        limit=limit,
        offset=offset,
        bom=bom,
        filters=_parse_filters(filters),
    )
    options: dict[str, Any] = {}
    if timeout is not None:
        options["timeout"] = timeout

    client = _client_or_exit(dataset_id, domain=domain, app_token=app_token, profile=profile)
    try:
        resp = _send(client.get_records, built, fmt, **options)
    finally:
        client.close()
    _render(resp, fmt or client.config.default_format or "json")
