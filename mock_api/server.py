"""
Mock host server for bucket connector testing.

Provides mock endpoints for:
- callback: Receives one page of object descriptors per request
- pages: Lists or clears the pages received so far
- reject: Makes the next callbacks fail, to exercise delivery failures
"""

import threading
from datetime import datetime
from typing import List, Dict, Any, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field


class DataObject(BaseModel):
    remote_id: str
    resource_name: str
    uri: str
    metadata: Dict[str, str] = Field(default_factory=dict)


class SyncResponse(BaseModel):
    response: List[DataObject] = Field(default_factory=list)


class CallbackAck(BaseModel):
    page_index: int
    objects: int
    received_at: datetime


class RejectRequest(BaseModel):
    count: int = 1
    status_code: int = 503


class PageStore:
    """Thread-safe in-memory store of received pages."""

    def __init__(self):
        self._lock = threading.Lock()
        self.pages: List[List[Dict[str, Any]]] = []
        self.reject_remaining = 0
        self.reject_status = 503

    def add(self, page: List[Dict[str, Any]]) -> int:
        with self._lock:
            self.pages.append(page)
            return len(self.pages)

    def take_rejection(self) -> Optional[int]:
        with self._lock:
            if self.reject_remaining <= 0:
                return None
            self.reject_remaining -= 1
            return self.reject_status

    def reset(self) -> None:
        with self._lock:
            self.pages = []
            self.reject_remaining = 0


store = PageStore()

app = FastAPI(
    title="Mock Connector Host",
    description="Mock host receiving descriptor pages from the bucket connector",
    version="1.0.0"
)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "message": "Mock Connector Host is running",
        "timestamp": datetime.now(),
        "pages_received": len(store.pages)
    }


@app.post("/callback", response_model=CallbackAck)
async def callback(payload: SyncResponse):
    """Receive one page of descriptors."""
    status = store.take_rejection()
    if status is not None:
        raise HTTPException(status_code=status, detail="Page rejected by mock host")

    page = [obj.model_dump() for obj in payload.response]
    page_index = store.add(page)
    return CallbackAck(page_index=page_index, objects=len(page), received_at=datetime.now())


@app.get("/pages")
async def list_pages():
    """Return every page received, in arrival order."""
    return {
        "pages": store.pages,
        "total_pages": len(store.pages),
        "total_objects": sum(len(page) for page in store.pages)
    }


@app.delete("/pages")
async def clear_pages():
    """Forget all received pages and pending rejections."""
    store.reset()
    return {"status": "cleared"}


@app.post("/reject")
async def reject_next(request: RejectRequest):
    """Reject the next `count` callbacks with the given status code."""
    if request.count < 0:
        raise HTTPException(status_code=400, detail="count must not be negative")
    store.reject_remaining = request.count
    store.reject_status = request.status_code
    return {"reject_remaining": store.reject_remaining, "status_code": store.reject_status}
