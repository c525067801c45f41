"""CLI entry point for furrymap."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from furrymap.client import SEARCH_FILTERS, FurryMap
from furrymap.config import Config

T = TypeVar("T")


def _run(action: Callable[[FurryMap], Awaitable[T]]) -> T:
    """Run *action* against a fresh client, exiting with status 1 on failure."""

    async def _go() -> T:
        async with FurryMap(Config.from_env()) as client:
            return await action(client)

    try:
        return asyncio.run(_go())
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """furrymap: search furrymap.net users, profiles and markers."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("name")
@click.option("--filter", "filter_", type=click.Choice(SEARCH_FILTERS), default=None,
              help="Only return furries or markers")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
def search(name: str, filter_: str | None, as_json: bool) -> None:
    """Search users and markers by NAME."""
    result = _run(lambda client: client.search(name, filter_))
    if as_json:
        _echo_json(result.model_dump(by_alias=True, mode="json"))
        return

    click.echo(f"{len(result.users)} user(s), {len(result.markers)} marker(s)")
    for user in result.users:
        species = f" ({user.species})" if user.species else ""
        click.echo(f"  [{user.id}] {user.name}{species}, {user.marker_count} marker(s)")
    for marker in result.markers:
        home = " [home]" if marker.is_home else ""
        loc = marker.location
        click.echo(
            f"  marker {marker.id}{home} {marker.user_name}: {marker.description} "
            f"@ {loc.latitude},{loc.longitude} {loc.country or ''}".rstrip()
        )


@main.command()
@click.argument("username")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
def profile(username: str, as_json: bool) -> None:
    """Show the profile of USERNAME."""
    result = _run(lambda client: client.get_profile(username))
    if as_json:
        _echo_json(result.model_dump(by_alias=True, mode="json"))
        return

    click.echo(f"=== {username} ===")
    if result.about:
        for key, value in result.about.model_dump(exclude_none=True).items():
            click.echo(f"  {key}: {value}")
    if result.contact:
        for key, value in result.contact.model_dump(exclude_none=True).items():
            click.echo(f"  {key}: {value}")
    for section in (result.messengers or {}, result.websites or {}):
        for key, value in section.items():
            click.echo(f"  {key}: {value}")
    click.echo(f"  {len(result.markers)} marker(s), {len(result.friends)} friend(s)")


@main.command()
@click.option("--refresh", is_flag=True, help="Ignore the cache file and download again")
@click.option("--json", "as_json", is_flag=True, help="Print the raw result as JSON")
def markers(refresh: bool, as_json: bool) -> None:
    """Load the full marker feed."""
    entries = _run(lambda client: client.load_markers(force_refresh=refresh))
    if as_json:
        _echo_json([e.model_dump(by_alias=True, exclude_none=True, mode="json") for e in entries])
        return
    click.echo(f"Marker count: {len(entries)}")


if __name__ == "__main__":
    main()
