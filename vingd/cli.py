"""
Command-line interface for the Vingd API client.
"""

from __future__ import annotations

import json
from typing import Any

import click
from pydantic import BaseModel

from vingd.client.client import VingdClient
from vingd.common.config import Config
from vingd.common.exceptions import VingdError
from vingd.common.models import ClientConfig


def to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True)
    if isinstance(data, list):
        return [to_jsonable(item) for item in data]
    return data


def echo_json(data: Any) -> None:
    click.echo(json.dumps(to_jsonable(data), indent=2, default=str))


def get_client(ctx: click.Context) -> VingdClient:
    """Create the client on first use, so that --help needs no credentials."""
    if "client" not in ctx.obj:
        params = ctx.obj["params"]
        try:
            ctx.obj["client"] = VingdClient(
                params["username"],
                params["password"],
                client_config=ClientConfig(environment=params["environment"]),
            )
        except ValueError as err:
            raise click.ClickException(str(err)) from err
    return ctx.obj["client"]


def run(ctx: click.Context, operation: str, *args: Any, **kwargs: Any) -> None:
    client = get_client(ctx)
    try:
        result = getattr(client, operation)(*args, **kwargs)
    except (VingdError, ValueError) as err:
        raise click.ClickException(str(err)) from err
    echo_json(result)


@click.group()
@click.option(
    "--environment",
    type=click.Choice(sorted(Config.ENVIRONMENTS)),
    default=None,
    envvar="VINGD_ENVIRONMENT",
    help="Broker environment (default: production)",
)
@click.option("--username", envvar="VINGD_USERNAME", help="Vingd username (API key)")
@click.option("--password", envvar="VINGD_PASSWORD", help="Vingd password")
@click.pass_context
def cli(
    ctx: click.Context,
    environment: str | None,
    username: str | None,
    password: str | None,
) -> None:
    """Vingd Broker API client"""
    ctx.ensure_object(dict)
    ctx.obj["params"] = {
        "environment": environment,
        "username": username,
        "password": password,
    }


@cli.command()
@click.pass_context
def profile(ctx: click.Context) -> None:
    """Show the authenticated user's profile"""
    run(ctx, "get_user_profile")


@cli.command()
@click.option("--huid", default=None, help="Balance of a delegated user instead")
@click.pass_context
def balance(ctx: click.Context, huid: str | None) -> None:
    """Show account balance"""
    if huid:
        run(ctx, "authorized_get_account_balance", huid)
    else:
        run(ctx, "get_account_balance")


@cli.command()
@click.pass_context
def objects(ctx: click.Context) -> None:
    """List registered objects"""
    run(ctx, "get_objects")


@cli.command()
@click.option("--from", "uid_from", type=int, default=None, help="Source user id")
@click.option("--to", "uid_to", type=int, default=None, help="Destination user id")
@click.option("--first", type=int, default=None, help="Number of oldest transfers")
@click.option("--last", type=int, default=None, help="Number of newest transfers")
@click.option("--since", default=None, help="Transfers newer than this date")
@click.option("--until", default=None, help="Transfers older than this date")
@click.pass_context
def transfers(
    ctx: click.Context,
    uid_from: int | None,
    uid_to: int | None,
    first: int | None,
    last: int | None,
    since: str | None,
    until: str | None,
) -> None:
    """List transfers"""
    run(
        ctx,
        "get_transfers",
        {"from": uid_from, "to": uid_to},
        {"first": first, "last": last, "since": since, "until": until},
    )


@cli.command()
@click.option("--history", is_flag=True, help="Include used and expired vouchers")
@click.pass_context
def vouchers(ctx: click.Context, history: bool) -> None:  # noqa: FBT001
    """List vouchers"""
    run(ctx, "get_vouchers" if history else "get_active_vouchers")


@cli.command("create-voucher")
@click.argument("amount", type=float)
@click.option("--until", default=None, help="Expiry date or period (default: +1 month)")
@click.option("--message", default="", help="Message shown on redemption")
@click.option("--gid", default=None, help="Voucher group id")
@click.option("--description", default=None, help="Internal description")
@click.pass_context
def create_voucher(
    ctx: click.Context,
    amount: float,
    until: str | None,
    message: str,
    gid: str | None,
    description: str | None,
) -> None:
    """Create a voucher of AMOUNT vingds"""
    run(ctx, "create_voucher", amount, until, message, gid, description)


if __name__ == "__main__":
    cli()
