"""
catalog_stub.py
---------------
A toy FastAPI stand-in for the catalog / ordering service the client talks
to. Orders from "error" are slow and at most 20 are handled at a time,
like the real service's connection limit.
"""

import asyncio

from fastapi import FastAPI, HTTPException

from models import Order

SLOW_ORDER_S = 0.2
MAX_CONNECTIONS = 20

CATALOG = {
    0: [{"id": 1, "name": "pencil"}, {"id": 2, "name": "eraser"}],
    1: [{"id": 5, "name": "notebook"}],
    2: [],
}

app = FastAPI(title="Toy Catalog Service", version="1.0")


class _State:
    def __init__(self):
        self.reset()

    def reset(self):
        self.active = 0
        self.peak = 0
        self.completed = 0
        self.started_after = []     # completed count seen by each order on arrival
        self.orders = []
        self.slots = asyncio.Semaphore(MAX_CONNECTIONS)


state = _State()


@app.get("/catalog/list/{category}")
async def list_catalog(category: int):
    if category not in CATALOG:
        raise HTTPException(404, f"No category {category}")
    return {"category": category, "items": CATALOG[category]}


@app.get("/availability/{item_id}")
async def availability(item_id: int):
    return {"id": item_id, "available": item_id % 2 == 1}


@app.put("/order")
async def order(body: Order):
    state.started_after.append(state.completed)
    state.orders.append(body)
    async with state.slots:
        state.active += 1
        state.peak = max(state.peak, state.active)
        try:
            if body.name == "error":
                await asyncio.sleep(SLOW_ORDER_S)
        finally:
            state.active -= 1
            state.completed += 1
    return {"status": "accepted", "items": len(body.items)}
