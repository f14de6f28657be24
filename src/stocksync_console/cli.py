from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from .config import PAGE_SIZE_OPTIONS, ConfigError, load_config
from .context import AppContext
from .exceptions import ApiError, DraftValidationError, NotAuthenticatedError
from .logging_utils import configure_logging
from .pagination import goto_page, set_page_size
from .synchronizers.base import ListSynchronizer
from .ui_errors import failure_message

Handler = Callable[[AppContext, argparse.Namespace], Awaitable[dict[str, Any]]]


class CommandFailed(RuntimeError):
    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload
        super().__init__(str(payload.get("error")))


async def _list(sync: ListSynchronizer, args: argparse.Namespace) -> dict[str, Any]:
    for key in sync.filter_keys:
        try:
            sync.filters.set(key, getattr(args, key, None))
        except ValueError as exc:
            raise CommandFailed({"error": str(exc)}) from exc
    await sync.fetch()
    if sync.error:
        raise CommandFailed({"error": sync.error})
    _apply_page(sync, args)
    return sync.render()


def _apply_page(sync: ListSynchronizer, args: argparse.Namespace) -> None:
    if args.page_size is not None:
        set_page_size(sync.pagination, args.page_size)
    goto_page(sync.pagination, args.page, len(sync.visible_rows()))


async def cmd_login(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    try:
        state = await ctx.session.login(args.email, args.password)
    except (ApiError, DraftValidationError) as exc:
        raise CommandFailed({"error": failure_message(exc, "Login failed")}) from exc
    identity = state.identity.model_dump(mode="json") if state.identity else None
    return {"status": state.status.value, "user": identity}


async def cmd_register(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    try:
        message = await ctx.session.register(args.name, args.email, args.password)
    except (ApiError, DraftValidationError) as exc:
        raise CommandFailed({"error": failure_message(exc, "Registration failed")}) from exc
    return {"message": message}


async def cmd_logout(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.session.logout()
    return {"status": ctx.session.state.status.value, "redirect": ctx.guard.check().redirect_to}


async def cmd_whoami(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    state = ctx.guard.require("whoami")
    identity = state.identity.model_dump(mode="json") if state.identity else None
    return {"status": state.status.value, "user": identity}


async def cmd_items(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.guard.require("items")
    return await _list(ctx.items(), args)


async def cmd_suppliers(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.guard.require("suppliers")
    return await _list(ctx.suppliers(), args)


async def cmd_stock(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.guard.require("stock")
    return await _list(ctx.stock(), args)


async def cmd_stock_record(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.guard.require("stock")
    sync = ctx.stock()
    draft = {"item": args.item, "quantity": args.quantity, "supplier": args.supplier or "", "note": args.note or ""}
    if not await sync.record(args.kind, draft):
        raise CommandFailed({"error": sync.editor.error, "editor": sync.editor.render()})
    return sync.render()


async def cmd_alerts(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.guard.require("alerts")
    sync = ctx.alerts()
    await sync.fetch()
    if sync.error:
        raise CommandFailed({"error": sync.error})
    sync.search(args.search or "")
    _apply_page(sync, args)
    return sync.render()


async def cmd_ack(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.guard.require("alerts")
    sync = ctx.alerts()
    if not await sync.acknowledge(args.alert_id):
        raise CommandFailed({"error": sync.action_error})
    return sync.render()


async def cmd_analytics(ctx: AppContext, args: argparse.Namespace) -> dict[str, Any]:
    ctx.guard.require("analytics")
    sync = ctx.analytics()
    if not await sync.fetch():
        raise CommandFailed({"error": sync.error})
    return sync.render()


async def _run(handler: Handler, args: argparse.Namespace) -> tuple[int, dict[str, Any]]:
    async with AppContext(load_config(args.env_file)) as ctx:
        try:
            return 0, await handler(ctx, args)
        except NotAuthenticatedError as exc:
            return 1, {"error": str(exc), "redirect": ctx.guard.login_path}
        except CommandFailed as exc:
            return 1, exc.payload


def _add_page_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, choices=PAGE_SIZE_OPTIONS, default=None)


def _add_list_arguments(parser: argparse.ArgumentParser, keys: tuple[str, ...]) -> None:
    for key in keys:
        parser.add_argument(f"--{key}", default=None)
    _add_page_arguments(parser)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stocksync", description="StockSync inventory console")
    parser.add_argument("--env-file", default=None)
    parser.add_argument("--log-level", default="WARNING")
    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", required=True)
    login_parser.set_defaults(func=cmd_login)

    register_parser = subparsers.add_parser("register")
    register_parser.add_argument("--name", required=True)
    register_parser.add_argument("--email", required=True)
    register_parser.add_argument("--password", required=True)
    register_parser.set_defaults(func=cmd_register)

    subparsers.add_parser("logout").set_defaults(func=cmd_logout)
    subparsers.add_parser("whoami").set_defaults(func=cmd_whoami)

    items_parser = subparsers.add_parser("items")
    _add_list_arguments(items_parser, ("name", "sku", "category"))
    items_parser.set_defaults(func=cmd_items)

    suppliers_parser = subparsers.add_parser("suppliers")
    _add_list_arguments(suppliers_parser, ("name", "email", "phone"))
    suppliers_parser.set_defaults(func=cmd_suppliers)

    stock_parser = subparsers.add_parser("stock")
    _add_list_arguments(stock_parser, ("item", "type", "user", "supplier"))
    stock_parser.set_defaults(func=cmd_stock)

    record_parser = subparsers.add_parser("stock-record")
    record_parser.add_argument("kind", choices=("inbound", "outbound"))
    record_parser.add_argument("--item", required=True)
    record_parser.add_argument("--quantity", required=True)
    record_parser.add_argument("--supplier", default=None)
    record_parser.add_argument("--note", default=None)
    record_parser.set_defaults(func=cmd_stock_record)

    alerts_parser = subparsers.add_parser("alerts")
    alerts_parser.add_argument("--search", default=None)
    _add_page_arguments(alerts_parser)
    alerts_parser.set_defaults(func=cmd_alerts)

    ack_parser = subparsers.add_parser("ack")
    ack_parser.add_argument("alert_id")
    ack_parser.set_defaults(func=cmd_ack)

    subparsers.add_parser("analytics").set_defaults(func=cmd_analytics)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())
    try:
        code, payload = asyncio.run(_run(args.func, args))
    except ConfigError as exc:
        code, payload = 1, {"error": str(exc)}
    print(json.dumps(payload, indent=2))
    return code


if __name__ == "__main__":
    sys.exit(main())
