"""
config.py
=========
Where the client reads its inputs from: the connection file and the
directory of order files. Paths can be overridden from the environment
($ CLIENT_CONFIG=..., $ CLIENT_ORDERS_DIR=...).
"""

import os

from pydantic import ValidationError

from errors import ConfigError, OrdersError
from models import Connection, Order

# ------------------------------------------------------------------ config --

CONFIG_PATH = os.getenv("CLIENT_CONFIG", "./config.json")
ORDERS_DIR = os.getenv("CLIENT_ORDERS_DIR", "./orders")

POLL_INTERVAL_S = 2.0
CATEGORIES = (0, 1, 2)
DEFAULT_AVAILABILITY_ID = 5
BURST_SIZE = 20          # server side handles 20 connections at a time

# ----------------------------------------------------------------- loaders --


def load_connection(path: str = CONFIG_PATH) -> Connection:
    try:
        with open(path, "rb") as fh:
            raw = fh.read()
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    try:
        return Connection.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e


def load_order(dirname: str = ORDERS_DIR) -> Order:
    """Parse the first file (in sorted listing order) of `dirname` as an Order."""
    try:
        names = sorted(
            n for n in os.listdir(dirname)
            if os.path.isfile(os.path.join(dirname, n))
        )
    except OSError as e:
        raise OrdersError(f"cannot list {dirname}: {e}") from e
    if not names:
        raise OrdersError(f"No files found in {dirname}")

    path = os.path.join(dirname, names[0])
    try:
        with open(path, "rb") as fh:
            raw = fh.read()
    except OSError as e:
        raise OrdersError(f"cannot read order {path}: {e}") from e
    try:
        return Order.model_validate_json(raw)
    except ValidationError as e:
        raise OrdersError(f"invalid order {path}: {e}") from e
