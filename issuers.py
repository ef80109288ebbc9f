"""
issuers.py
==========
The three request issuers of the catalog client.

    • query_items        – GET /catalog/list/{category}  (all categories or one)
    • query_availability – GET /availability/{id}        (default id 5)
    • submit_orders      – PUT /order                    (one order, or a burst
                                                          of 20 bad ones)

Every issuer is a "poll once" coroutine wrapped by `repeat`, which runs it
forever (or `iterations` times) with a fixed pause in between.
"""

import asyncio
import json
import sys
import time
from typing import Awaitable, Callable, List, Optional, Tuple

import httpx

from config import (BURST_SIZE, CATEGORIES, DEFAULT_AVAILABILITY_ID,
                    ORDERS_DIR, POLL_INTERVAL_S, load_order)
from errors import NetworkError, ResponseReadError
from latency import LatencyCollector
from models import Connection, Item, Order

ACCEPT_JSON = {"Accept": "application/json"}
SEND_JSON = {"Content-Type": "application/json", "Accept": "application/json"}

# ------------------------------------------------------------------- urls --


def catalog_url(conn: Connection, category: int) -> str:
    return f"{conn.base_url}/catalog/list/{category}"


def availability_url(conn: Connection, item_id: Optional[int] = None) -> str:
    if item_id is None:
        item_id = DEFAULT_AVAILABILITY_ID
    return f"{conn.base_url}/availability/{item_id}"


def order_url(conn: Connection) -> str:
    return f"{conn.base_url}/order"


# --------------------------------------------------------------- printing --


_WS = b" \t\r\n"
INDENT = b"  "


def _reject_constant(name):
    raise ValueError(f"not a JSON value: {name}")


def pretty_body(raw: bytes) -> bytes:
    """Re-indent a JSON body with two spaces; anything else comes back as is.

    Only whitespace between tokens changes: numbers, strings and repeated
    keys are kept byte for byte.
    """
    try:
        json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except ValueError:
        return raw
    return _indent(raw)


def _indent(raw: bytes) -> bytes:
    out = bytearray()
    depth = 0
    in_string = escaped = False
    opened = False          # container just opened, its newline is not written yet
    for byte in raw:
        ch = bytes((byte,))
        if in_string:
            out += ch
            if escaped:
                escaped = False
            elif ch == b"\\":
                escaped = True
            elif ch == b'"':
                in_string = False
            continue
        if ch in _WS:
            continue
        if opened:
            opened = False
            if ch in b"}]":
                depth -= 1
                out += ch
                continue
            out += b"\n" + INDENT * depth
        if ch in b"{[":
            out += ch
            depth += 1
            opened = True
        elif ch in b"}]":
            depth -= 1
            out += b"\n" + INDENT * depth + ch
        elif ch == b",":
            out += b",\n" + INDENT * depth
        elif ch == b":":
            out += b": "
        else:
            out += ch
            in_string = ch == b'"'
    return bytes(out)


def _show(latency_ms: float, body: bytes, stats: Optional[LatencyCollector]):
    if stats is not None:
        stats.add(latency_ms)
    # bodies go out untouched, so write bytes past the text layer
    line = f"Time elapsed: {latency_ms:.1f} ms | Response: ".encode()
    sys.stdout.flush()
    sys.stdout.buffer.write(line + pretty_body(body) + b"\n")
    sys.stdout.buffer.flush()


# ---------------------------------------------------------------- request --


async def fetch(cli: httpx.AsyncClient, method: str, url: str,
                headers: dict, content: Optional[bytes] = None) -> Tuple[float, bytes]:
    """Send one request, return (elapsed ms, body)."""
    t0 = time.time()
    try:
        request = cli.build_request(method, url, headers=headers, content=content)
        response = await cli.send(request, stream=True)
    except (httpx.InvalidURL, httpx.HTTPError) as e:
        raise NetworkError(f"{method} {url}: {e!r}") from e
    try:
        body = await response.aread()
    except (httpx.HTTPError, httpx.StreamError) as e:
        raise ResponseReadError(f"{method} {url}: reading body failed: {e!r}") from e
    finally:
        await response.aclose()
    return (time.time() - t0) * 1_000, body


async def repeat(poll: Callable[[], Awaitable], iterations: Optional[int] = None,
                 interval: float = POLL_INTERVAL_S):
    """Run `poll` forever, or `iterations` times, sleeping `interval` in between."""
    done = 0
    while True:
        await poll()
        done += 1
        if iterations is not None and done >= iterations:
            return
        await asyncio.sleep(interval)


# ------------------------------------------------------------- catalog --


async def get_once(cli: httpx.AsyncClient, url: str,
                   stats: Optional[LatencyCollector] = None):
    latency, body = await fetch(cli, "GET", url, ACCEPT_JSON)
    _show(latency, body, stats)


async def list_once(cli, conn, categories, stats=None):
    for category in categories:
        await get_once(cli, catalog_url(conn, category), stats)


async def query_items(cli: httpx.AsyncClient, conn: Connection,
                      item_id: Optional[int] = None, *,
                      iterations: Optional[int] = None,
                      interval: float = POLL_INTERVAL_S,
                      stats: Optional[LatencyCollector] = None):
    categories = CATEGORIES if item_id is None else (item_id,)
    await repeat(lambda: list_once(cli, conn, categories, stats),
                 iterations, interval)


async def query_availability(cli: httpx.AsyncClient, conn: Connection,
                             item_id: Optional[int] = None, *,
                             iterations: Optional[int] = None,
                             interval: float = POLL_INTERVAL_S,
                             stats: Optional[LatencyCollector] = None):
    url = availability_url(conn, item_id)
    await repeat(lambda: get_once(cli, url, stats), iterations, interval)


# -------------------------------------------------------------- orders --


def bad_order() -> Order:
    return Order(name="error", address="badhood",
                 items=[Item(catalog_id=5, amount=1)])


async def submit_attempt(cli: httpx.AsyncClient, url: str, payload: bytes,
                         attempt: int,
                         stats: Optional[LatencyCollector] = None) -> bool:
    try:
        latency, body = await fetch(cli, "PUT", url, SEND_JSON, content=payload)
    except (NetworkError, ResponseReadError) as e:
        print(f"{attempt}: Error {e}")
        if stats is not None:
            stats.add_failure()
        return False
    _show(latency, body, stats)
    return True


async def submit_burst(cli: httpx.AsyncClient, url: str, payload: bytes,
                       connections: int,
                       stats: Optional[LatencyCollector] = None) -> List[bool]:
    """Fire `connections` concurrent attempts and wait for every one of them."""
    return await asyncio.gather(
        *(submit_attempt(cli, url, payload, i, stats) for i in range(connections))
    )


async def submit_orders(cli: httpx.AsyncClient, conn: Connection,
                        error_mode: bool = False, *,
                        orders_dir: str = ORDERS_DIR,
                        iterations: Optional[int] = None,
                        interval: float = POLL_INTERVAL_S,
                        stats: Optional[LatencyCollector] = None):
    # The server handles 20 connections; a bad order occupies each of them.
    if error_mode:
        order, connections = bad_order(), BURST_SIZE
    else:
        order, connections = load_order(orders_dir), 1
    payload = order.to_json()
    url = order_url(conn)
    await repeat(lambda: submit_burst(cli, url, payload, connections, stats),
                 iterations, interval)
