"""FastAPI application for the Datumprikker Collector API."""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ingest.download import NetworkError, PageParseError, download_event
from ingest.schemas import Event
from scrapers.datumprikker_page import NonExistingEvent

VERSION = "1.0.0"

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Datumprikker Collector API",
    description="API for extracting event summaries from datumprikker.nl pages",
    version=VERSION,
)

# Thread pool for running the blocking download in async context
executor = ThreadPoolExecutor(max_workers=4)


class DateRangeModel(BaseModel):
    """Finalized date range of an event, in UTC."""
    start: datetime
    end: datetime


class EventModel(BaseModel):
    """Event summary as returned by the API."""
    canonical_url: str
    title: str
    final_date: Optional[DateRangeModel] = None
    open_registration_link: Optional[str] = None

    @classmethod
    def from_event(cls, event: Event) -> "EventModel":
        final_date = None
        if event.final_date:
            final_date = DateRangeModel(start=event.final_date.start, end=event.final_date.end)
        return cls(
            canonical_url=event.canonical_url,
            title=event.title,
            final_date=final_date,
            open_registration_link=event.open_registration_link,
        )


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    version: str


class EventRequest(BaseModel):
    """Request model for event extraction."""
    url: str


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=VERSION
    )


@app.post("/event", response_model=EventModel)
async def extract_event(request: EventRequest):
    """
    Download the event-overview page at ``url`` and return its summary.

    - 404 when the event does not exist
    - 502 when the page could not be fetched or has an unexpected layout
    - 422 when the url is not an http(s) url
    """
    loop = asyncio.get_event_loop()
    try:
        event = await loop.run_in_executor(executor, download_event, request.url)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except NetworkError as e:
        logger.warning("Fetching %s failed: %s", request.url, e)
        raise HTTPException(status_code=502, detail=str(e))
    except PageParseError as e:
        if isinstance(e.reason, NonExistingEvent):
            raise HTTPException(status_code=404, detail=str(e.reason))
        logger.warning("Parsing %s failed: %s", request.url, e.reason)
        raise HTTPException(
            status_code=502,
            detail=f"{type(e.reason).__name__}: {e.reason}",
        )

    return EventModel.from_event(event)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Datumprikker Collector API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8001)
