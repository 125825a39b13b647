"""Events API - FastAPI service for event CRUD.

Stores events in Firestore and serves them to the search front-end.
Every response uses the envelope {statusCode, data, message, success}.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.validation import is_valid_event_id, validate_event_payload
from src.shell.config_loader import load_config
from src.shell.event_store import EventStoreConfig, FirestoreEventStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Events API",
    description="Create, list and look up events",
    version="1.0.0",
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGIN", "*").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# ===== Data Models =====

class EventCreate(BaseModel):
    """Create-event request body.

    Fields are optional here so that missing values are reported with the
    same 400 message as other validation failures.
    """
    title: str | None = None
    description: str | None = None
    location: str | None = None
    date: str | None = None
    maxParticipants: int | None = None
    currentParticipants: int | None = None


# ===== Event Store =====

_event_store: FirestoreEventStore | None = None


def get_event_store() -> FirestoreEventStore:
    """Get or create the event store."""
    global _event_store
    if _event_store is None:
        store_config = load_config().store
        _event_store = FirestoreEventStore(
            EventStoreConfig(
                database=store_config.firestore_database,
                collection=store_config.firestore_collection,
            )
        )
        logger.info(
            "Event store initialized for collection: %s",
            store_config.firestore_collection,
        )
    return _event_store


# ===== Helper Functions =====

def _envelope(status_code: int, data: Any, message: str) -> JSONResponse:
    """Build a success response in the standard envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "data": data,
            "message": message,
            "success": status_code < 400,
        },
    )


def _error_envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "message": message,
            "success": False,
            "data": None,
        },
    )


# ===== Error Handlers =====

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the standard envelope."""
    return _error_envelope(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render malformed request bodies as 400s."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return _error_envelope(400, f"{field}: {message}" if field else message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Render anything else as a 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_envelope(500, str(exc) or "Something went wrong")


# ===== Endpoints =====

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "OK",
        "message": "Backend server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.post("/api/events")
def create_event(
    body: EventCreate,
    store: FirestoreEventStore = Depends(get_event_store),
):
    """Create a new event."""
    payload = body.model_dump(exclude_none=True)

    errors = validate_event_payload(payload)
    if errors:
        raise HTTPException(status_code=400, detail=errors[0].message)

    try:
        event = store.create_event(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _envelope(201, event, "Event created successfully")


@app.get("/api/events")
def list_events(
    location: str | None = Query(default=None),
    store: FirestoreEventStore = Depends(get_event_store),
):
    """List events, optionally filtered by location (case-insensitive substring)."""
    events = store.list_events(location)
    return _envelope(200, events, "Events retrieved successfully")


@app.get("/api/events/{event_id}")
def get_event(
    event_id: str,
    store: FirestoreEventStore = Depends(get_event_store),
):
    """Get a single event by ID."""
    if not is_valid_event_id(event_id):
        raise HTTPException(status_code=400, detail="Invalid event ID format")

    event = store.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    return _envelope(200, event, "Event details retrieved successfully")

