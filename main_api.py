"""
Watchtower — FastAPI Backend
============================
Exposes the contact directory and the link checker to the mobile/web UI:
  - Directory refresh  (PostbackCrawlerAdapter → JsonContactStoreAdapter)
  - Number search / scammer flagging
  - URL reputation check (SafeBrowsingAdapter)

Start:
    uvicorn main_api:app --reload --port 8000

Interactive docs:
    http://localhost:8000/docs
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, Header, HTTPException, status
from pydantic import BaseModel

from watchtower.domain.entities.contact_record import ContactRecord, normalize_phone
from watchtower.domain.interfaces.i_reputation_gateway import ReputationLookupError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(levelname)s  %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(title="Watchtower API", version="1.0.0")

# ── Dependency-injection container (initialised at startup) ───────────────────

_container = None
_startup_error: Optional[str] = None


@app.on_event("startup")
async def startup():
    global _container, _startup_error
    try:
        from watchtower.infrastructure.config import Config
        from watchtower.infrastructure.container import Container

        _container = Container(Config.from_env())
        logger.info("Container initialised successfully.")
    except Exception as e:
        _startup_error = str(e)
        logger.error(f"Container startup failed: {e}")


def get_container():
    if _startup_error:
        raise HTTPException(status_code=503, detail=f"Service misconfigured: {_startup_error}")
    if _container is None:
        raise HTTPException(status_code=503, detail="Service not ready.")
    return _container


# ── Auth ──────────────────────────────────────────────────────────────────────

def _auth(x_api_key: str = Header(...)) -> None:
    if x_api_key != get_container().config.api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


# ── Request / Response models ─────────────────────────────────────────────────


class ContactOut(BaseModel):
    name: str
    designation: str
    phone: str
    isScammer: bool


class SearchResponse(BaseModel):
    found: bool
    message: str
    contact: Optional[ContactOut] = None


class FlagRequest(BaseModel):
    phone: str
    name: Optional[str] = None
    designation: Optional[str] = None


class RefreshOut(BaseModel):
    updated: bool
    records_scraped: int
    pages_fetched: int
    phase: str
    message: str
    error: Optional[str] = None


class UrlCheckRequest(BaseModel):
    url: str


class UrlCheckResponse(BaseModel):
    url: str
    unsafe: bool


def _contact_out(record: ContactRecord) -> ContactOut:
    return ContactOut(**record.to_dict())


def _refresh_out(response) -> RefreshOut:
    return RefreshOut(
        updated=response.updated,
        records_scraped=response.records_scraped,
        pages_fetched=response.pages_fetched,
        phase=response.phase.value,
        message=response.message,
        error=response.error,
    )


# ── Routes ────────────────────────────────────────────────────────────────────


@app.get("/health", tags=["meta"])
async def health():
    return {
        "status": "ok" if _container is not None else "degraded",
        "startup_error": _startup_error,
    }


@app.post("/contacts/refresh", response_model=RefreshOut, tags=["contacts"])
async def refresh_contacts(_: None = Depends(_auth)):
    container = get_container()
    try:
        response = await container.directory_service.refresh()
    except OSError as e:
        logger.error(f"[API] Could not persist contacts: {e}")
        raise HTTPException(status_code=500, detail=f"Could not save contacts: {e}")
    return _refresh_out(response)


@app.post("/contacts/init", tags=["contacts"])
async def init_contacts(_: None = Depends(_auth)):
    container = get_container()
    try:
        response = await container.directory_service.ensure_initialized()
    except OSError as e:
        logger.error(f"[API] Could not persist contacts: {e}")
        raise HTTPException(status_code=500, detail=f"Could not save contacts: {e}")
    if response is None:
        return {"initialized": False, "message": "Database loaded, ready to search!"}
    return {"initialized": True, **_refresh_out(response).model_dump()}


@app.get("/contacts/search", response_model=SearchResponse, tags=["contacts"])
async def search_contacts(phone: str, _: None = Depends(_auth)):
    if not normalize_phone(phone):
        raise HTTPException(status_code=422, detail="Please enter a phone number to search.")
    container = get_container()
    record = await container.directory_service.search(phone)
    if record is None:
        return SearchResponse(found=False, message="No match found in database")
    return SearchResponse(found=True, message="Match found!", contact=_contact_out(record))


@app.post("/contacts/flag", response_model=ContactOut, tags=["contacts"])
async def flag_contact(req: FlagRequest, _: None = Depends(_auth)):
    container = get_container()
    known = None
    if req.name or req.designation:
        known = ContactRecord(
            name=req.name or "", designation=req.designation or "", phone=req.phone
        )
    try:
        record = await container.directory_service.flag_as_scammer(req.phone, known)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except OSError as e:
        logger.error(f"[API] Could not persist flag for {req.phone!r}: {e}")
        raise HTTPException(status_code=500, detail=f"Could not save contact: {e}")
    return _contact_out(record)


@app.post("/urls/check", response_model=UrlCheckResponse, tags=["links"])
async def check_url(req: UrlCheckRequest, _: None = Depends(_auth)):
    container = get_container()
    try:
        unsafe = await container.reputation.is_flagged_unsafe(req.url)
    except ReputationLookupError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return UrlCheckResponse(url=req.url, unsafe=unsafe)
