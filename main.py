import os
import sys
from fastapi import FastAPI
from loguru import logger
from pydantic import BaseModel
from typing import Optional
from contextlib import asynccontextmanager

from structures.indexed_heap import IndexedBinaryHeap, HeapEntry


service_config = {
    "log_level": os.getenv("PRIORITY_QUEUE_LOG_LEVEL", "INFO").upper(),
    "default_queue": os.getenv("PRIORITY_QUEUE_DEFAULT_QUEUE", "default"),
}


class InsertRequest(BaseModel):
    queue_id: str
    value: int


class RemoveRequest(BaseModel):
    queue_id: str


class EntryModel(BaseModel):
    value: int
    priority: int


class InsertResponse(BaseModel):
    queue_id: str
    value: int
    priority: int
    size: int


class TopResponse(BaseModel):
    queue_id: str
    empty: bool
    entry: Optional[EntryModel] = None
    size: int


class QueueStatusResponse(BaseModel):
    queue_id: str
    size: int


app_state = {
    "queues": {}
}


def configure_logging(level: str):
    logger.remove()
    logger.add(sys.stderr, level=level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(service_config["log_level"])
    get_queue(service_config["default_queue"])
    logger.info(f"Priority queue service started (default queue: {service_config['default_queue']})")

    yield

    logger.info(f"Priority queue service stopping with {len(app_state['queues'])} queue(s)")


app = FastAPI(title="Counting Priority Queue", lifespan=lifespan)


def get_queue(queue_id: str):
    if queue_id not in app_state["queues"]:
        app_state["queues"][queue_id] = IndexedBinaryHeap()
        logger.info(f"Created queue {queue_id}")
    return app_state["queues"][queue_id]


def _top_response(queue_id: str, entry: Optional[HeapEntry], size: int):
    if entry is None:
        return TopResponse(queue_id=queue_id, empty=True, size=size)
    return TopResponse(
        queue_id=queue_id,
        empty=False,
        entry=EntryModel(value=entry.value, priority=entry.priority),
        size=size
    )


@app.post("/v1/queue/insert", response_model=InsertResponse)
async def insert_value(request: InsertRequest):
    queue = get_queue(request.queue_id)

    queue.insert(request.value)
    priority = queue.priority_of(request.value)
    logger.debug(f"Inserted {request.value} into {request.queue_id} (priority {priority})")

    return InsertResponse(
        queue_id=request.queue_id,
        value=request.value,
        priority=priority,
        size=queue.size()
    )


@app.post("/v1/queue/remove", response_model=TopResponse)
async def remove_top(request: RemoveRequest):
    queue = app_state["queues"].get(request.queue_id)
    if queue is None:
        return _top_response(request.queue_id, None, 0)

    entry = queue.remove_top()
    if entry is not None:
        logger.debug(f"Removed {entry.value} from {request.queue_id} (priority {entry.priority})")

    return _top_response(request.queue_id, entry, queue.size())


@app.get("/v1/queue/peek", response_model=TopResponse)
async def peek_top(queue_id: str):
    queue = app_state["queues"].get(queue_id)
    if queue is None:
        return _top_response(queue_id, None, 0)

    return _top_response(queue_id, queue.peek(), queue.size())


@app.get("/v1/queue/status", response_model=QueueStatusResponse)
async def get_queue_status(queue_id: str):
    queue = app_state["queues"].get(queue_id)

    return QueueStatusResponse(
        queue_id=queue_id,
        size=queue.size() if queue is not None else 0
    )


@app.delete("/v1/queue/{queue_id}")
async def delete_queue(queue_id: str):
    existed = app_state["queues"].pop(queue_id, None) is not None
    if existed:
        logger.info(f"Deleted queue {queue_id}")

    return {"status": "deleted", "queue_id": queue_id, "existed": existed}


@app.get("/health")
async def health():
    return {"status": "healthy", "queues": len(app_state["queues"])}
