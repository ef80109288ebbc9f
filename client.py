#!/usr/bin/env python3
"""
client.py
=========
Command-line load client for the catalog / ordering service.

    client OPERATION [item_id] [--error]

Reads the target host and port from ./config.json, then keeps hitting
the chosen endpoint every two seconds until interrupted (Ctrl+C prints
a latency summary).
"""

import asyncio
import re
import sys
from typing import List, Optional

import httpx

import config
from errors import ClientError, UsageError
from issuers import query_availability, query_items, submit_orders
from latency import LatencyCollector
from models import Action, Connection, Operation

HELP = """Usage: client OPERATION [item_id] [--error]

OPERATION
  * items
  * availability
  * order

Examples:
  # List items in all categories
  client items

  # List items in category 0 (available categories are 0,1,2)
  client items 0

  # Query availability of item with id 1
  client availability 1

  # Query availability of an arbitrary item
  client availability

  # Send order from 'orders' dir to server
  client order

  # Send order to a slow endpoint
  client order --error"""

_INT = re.compile(r"[+-]?[0-9]+")

# ------------------------------------------------------------------- args --


def parse_args(argv: List[str]) -> Action:
    """Map `OP`, `OP --error`, `OP <id>` or `OP <id> --error` to an Action."""
    if not argv or argv[0] not in Operation.__members__:
        raise UsageError(HELP)
    op = Operation(argv[0])
    rest = argv[1:]

    if not rest:
        return Action(op)
    if rest == ["--error"]:
        return Action(op, error_mode=True)
    if len(rest) in (1, 2) and _INT.fullmatch(rest[0]):
        if len(rest) == 1:
            return Action(op, int(rest[0]))
        if rest[1] == "--error":
            return Action(op, int(rest[0]), True)
    raise UsageError(HELP)


# --------------------------------------------------------------- dispatch --


async def dispatch(action: Action, conn: Connection, *,
                   transport: Optional[httpx.AsyncBaseTransport] = None,
                   stats: Optional[LatencyCollector] = None,
                   orders_dir: str = config.ORDERS_DIR,
                   iterations: Optional[int] = None,
                   interval: float = config.POLL_INTERVAL_S):
    print(f"Operation: {action.operation.label}")
    loop_args = dict(iterations=iterations, interval=interval, stats=stats)

    async with httpx.AsyncClient(timeout=None, transport=transport) as cli:
        if action.operation is Operation.items:
            await query_items(cli, conn, action.item_id, **loop_args)
        elif action.operation is Operation.availability:
            await query_availability(cli, conn, action.item_id, **loop_args)
        else:
            await submit_orders(cli, conn, action.error_mode,
                                orders_dir=orders_dir, **loop_args)


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    stats = LatencyCollector()
    try:
        conn = config.load_connection()
        action = parse_args(argv)
        asyncio.run(dispatch(action, conn, stats=stats))
    except ClientError as e:
        print(e)
        return 1
    except KeyboardInterrupt:
        print("\n[client] interrupted")
        print(stats.report())
    return 0


if __name__ == "__main__":
    sys.exit(main())
