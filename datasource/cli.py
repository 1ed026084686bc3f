# datasource/cli.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from . import config
from .exceptions import FetchError, InvalidMinimum
from .fetch import DataSource
from .swapi import Swapi


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def _minimum_arg(raw: str | None) -> Any:
    """
    Map the --minimum flag onto a fetch_multiple() option.

    "any" means one cached entry is enough; everything else ("60%", "-1", "3")
    is passed through and parsed by the threshold layer.
    """
    if raw is None:
        return None
    if raw.strip().lower() == "any":
        return True
    return raw


# --------------------------------------------------------------------------------------
# Commands
# --------------------------------------------------------------------------------------


async def _run_one(api: Swapi, args: argparse.Namespace) -> Any:
    return await api.fetch_one(args.url)


async def _run_list(api: Swapi, args: argparse.Namespace) -> Any:
    if args.page:
        return await api.fetch_list(args.url, page=args.page)
    page = await api.fetch_list(args.url)
    while args.all and not page.exhausted:
        page = await page.more()
    return list(page)


async def _run_multiple(api: Swapi, args: argparse.Namespace) -> Any:
    return await api.fetch_multiple(args.urls, minimum=_minimum_arg(args.minimum))


async def _run(args: argparse.Namespace) -> Any:
    async with Swapi(DataSource(), base_url=args.base_url) as api:
        return await args.runner(api, args)


# --------------------------------------------------------------------------------------
# Parser
# --------------------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="datasource",
        description="Fetch JSON from a paginated Django REST API and print it.",
    )
    parser.add_argument(
        "--base-url",
        default=config.SWAPI_BASE_URL,
        help=f"Base URL for relative paths (default: {config.SWAPI_BASE_URL}).",
    )
    parser.add_argument(
        "--log-level",
        default=config.DATASOURCE_LOG_LEVEL,
        help="Logging level (default: DATASOURCE_LOG_LEVEL or WARNING).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    one_parser = subparsers.add_parser("one", help="Fetch a single object.")
    one_parser.add_argument("url")
    one_parser.set_defaults(runner=_run_one)

    list_parser = subparsers.add_parser("list", help="Fetch a list endpoint.")
    list_parser.add_argument("url")
    list_parser.add_argument(
        "--page",
        type=int,
        default=None,
        help="Fetch only this page number.",
    )
    list_parser.add_argument(
        "--all",
        action="store_true",
        help="Follow 'next' links until the list is exhausted.",
    )
    list_parser.set_defaults(runner=_run_list)

    multiple_parser = subparsers.add_parser("multiple", help="Fetch several objects.")
    multiple_parser.add_argument("urls", nargs="+")
    multiple_parser.add_argument(
        "--minimum",
        default=None,
        help="Cached entries needed to return early: N, -N, 'P%%' or 'any' (default: all).",
    )
    multiple_parser.set_defaults(runner=_run_multiple)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
            format="%(levelname)s %(name)s %(message)s",
        )

    try:
        payload = asyncio.run(_run(args))
    except (FetchError, InvalidMinimum) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _emit(payload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
