"""CLI entrypoint for the dataset cache."""

from __future__ import annotations

import json
import os
from typing import Any, List, Optional

import requests
import typer

app = typer.Typer(name="dscache", help="Dataset cache command-line interface")
datasets_app = typer.Typer(name="datasets", help="Inspect and drop cached datasets")
app.add_typer(datasets_app, name="datasets")

DEFAULT_HOST = "http://127.0.0.1:5180"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip('/')
    env_host = os.environ.get("DSC_HOST")
    if env_host:
        return env_host.rstrip('/')
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    resp = requests.request(method, url, timeout=60, **kwargs)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _parse_filters(pairs: List[str]) -> dict[str, Any]:
    """Turn ``field=value`` pairs into a filter mapping; values are JSON when they parse."""
    filters: dict[str, Any] = {}
    for pair in pairs:
        field, sep, raw = pair.partition("=")
        if not sep or not field:
            raise typer.BadParameter(f"Expected FIELD=VALUE, got {pair!r}", param_hint="--filter")
        try:
            filters[field] = json.loads(raw)
        except ValueError:
            filters[field] = raw
    return filters


def _id_candidates(raw: str) -> list[int | str]:
    """Numeric ids match both integer and string identities."""
    try:
        return [int(raw), raw]
    except ValueError:
        return [raw]


@app.command()
def query(
    dataset_id: str = typer.Argument(..., help="Dataset identifier"),
    filter_: List[str] = typer.Option([], "--filter", "-f", help="FIELD=VALUE filter, repeatable"),
    ids: List[str] = typer.Option([], "--id", help="Only items with this identity, repeatable"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Text search across fields"),
    sort_by: Optional[str] = typer.Option(None, "--sort-by", help="Field to sort by"),
    order: str = typer.Option("desc", "--order", help="Sort order: asc or desc"),
    page: int = typer.Option(1, "--page", help="1-based page number"),
    page_size: Optional[int] = typer.Option(None, "--page-size", help="Items per page (max 100)"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Query a cached dataset."""
    if order not in ("asc", "desc"):
        raise typer.BadParameter("order must be 'asc' or 'desc'", param_hint="--order")
    payload: dict[str, object] = {"page": page, "sort_order": order}
    if filter_:
        payload["filters"] = _parse_filters(filter_)
    if ids:
        payload["ids"] = [candidate for value in ids for candidate in _id_candidates(value)]
    if search:
        payload["search"] = search
    if sort_by:
        payload["sort_by"] = sort_by
    if page_size is not None:
        payload["page_size"] = page_size
    resp = _request("POST", f"/datasets/{dataset_id}/query", host=host, json=payload)
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def get(
    dataset_id: str = typer.Argument(..., help="Dataset identifier"),
    item_id: str = typer.Argument(..., help="Item identity"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Print the full record for one item."""
    resp = _request("GET", f"/datasets/{dataset_id}/items/{item_id}", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


@datasets_app.command("list")
def list_datasets(
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """List live datasets."""
    resp = _request("GET", "/datasets", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


@datasets_app.command("show")
def show_dataset(
    dataset_id: str = typer.Argument(..., help="Dataset identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show metadata and summary for a dataset."""
    resp = _request("GET", f"/datasets/{dataset_id}", host=host)
    typer.echo(json.dumps(resp.json(), indent=2))


@datasets_app.command("delete")
def delete_dataset(
    dataset_id: str = typer.Argument(..., help="Dataset identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Drop a cached dataset."""
    resp = _request("DELETE", f"/datasets/{dataset_id}", host=host)
    typer.echo(json.dumps(resp.json()))


if __name__ == "__main__":
    app()
