"""
Disc Tracker API

FastAPI app for logging disc golf rounds and importing UDisc scorecards.
"""

import logging
import os
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional
from uuid import UUID

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from disc_tracker import __version__
from disc_tracker.errors import InvalidRequest, PersistenceError, RoundImportError, RoundNotFound
from disc_tracker.importers.udisc_importer import UDiscImporter
from disc_tracker.models.round import ManualRoundRequest
from disc_tracker.storage.round_store import RoundStore
from disc_tracker.utils.csv_validator import CSVValidator


logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Disc Tracker",
    description="Log disc golf rounds manually or import them from UDisc CSV exports",
    version=__version__,
)


@lru_cache(maxsize=1)
def get_store() -> RoundStore:
    """Shared round store (one connection pool per process)."""
    return RoundStore()


@app.exception_handler(RoundImportError)
async def round_import_error_handler(request: Request, exc: RoundImportError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = InvalidRequest("Invalid request", details=jsonable_errors(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def jsonable_errors(exc: RequestValidationError):
    """Validation errors without the raw input/context objects."""
    return [
        {'loc': list(err.get('loc', ())), 'msg': err.get('msg', '')}
        for err in exc.errors()
    ]


def _form_text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


@app.get("/")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "disc-tracker",
        "version": __version__,
    }


@app.get("/health")
async def health():
    """Alias for health check."""
    return await health_check()


@app.post("/api/import/udisc")
async def import_udisc(request: Request, store: RoundStore = Depends(get_store)):
    """
    Import one round from a UDisc scorecard CSV.

    Multipart fields: file, userId, playerName (optional).
    Returns the created round, the number of hole results inserted, the
    imported player's name and the resolved header map.
    """
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type:
        raise InvalidRequest(
            "Content-Type must be multipart/form-data",
            details={"contentType": content_type},
        )

    form = await request.form()
    upload = form.get("file")
    user_id = _form_text(form.get("userId"))
    player_name = _form_text(form.get("playerName")) or None

    if not isinstance(upload, UploadFile):
        raise InvalidRequest("Missing CSV file or file is not a File")
    if not user_id:
        raise InvalidRequest("Missing userId field")

    try:
        validator = CSVValidator()
        content = await upload.read()
        validator.validate_size(content)
        csv_text = validator.decode(content)

        importer = UDiscImporter(store)
        outcome = await run_in_threadpool(
            importer.import_csv,
            csv_text,
            user_id,
            upload.filename,
            player_name,
        )
    except RoundImportError:
        raise
    except Exception as e:
        logger.exception("Unhandled error in POST /api/import/udisc")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Unexpected server error while importing UDisc CSV",
                "category": "server_error",
                "details": str(e),
            },
        )

    status_code = 200 if outcome.ok else 500
    return JSONResponse(status_code=status_code, content=outcome.to_response())


@app.get("/api/rounds")
def list_rounds(userId: Optional[str] = None, store: RoundStore = Depends(get_store)):
    """Return all rounds for a user, newest first."""
    if not userId:
        raise InvalidRequest("Missing userId query param")

    try:
        rounds = store.list_rounds(userId)
    except Exception as e:
        logger.exception("Error fetching rounds")
        raise PersistenceError("Error fetching rounds", stage="read", details=str(e)) from e

    return {"rounds": [r.model_dump(mode='json') for r in rounds]}


@app.post("/api/rounds", status_code=201)
def create_round(body: ManualRoundRequest, store: RoundStore = Depends(get_store)):
    """Create a simple manual round starting now."""
    new_round = body.to_new_round(datetime.now(timezone.utc).replace(tzinfo=None))
    try:
        created = store.insert_round(new_round)
    except Exception as e:
        logger.exception("Error creating round")
        raise PersistenceError("Error creating round", stage="round", details=str(e)) from e

    return {"round": created.model_dump(mode='json')}


@app.get("/api/rounds/{round_id}")
def get_round(round_id: UUID, store: RoundStore = Depends(get_store)):
    """Return a round with its hole results in play order."""
    try:
        found = store.get_round(round_id)
        holes = store.list_hole_results(round_id) if found else []
    except Exception as e:
        logger.exception("Error fetching round %s", round_id)
        raise PersistenceError("Error fetching round", stage="read", details=str(e)) from e

    if found is None:
        raise RoundNotFound("Round not found", details={"roundId": str(round_id)})

    return {
        "round": found.model_dump(mode='json'),
        "holes": [h.model_dump(mode='json') for h in holes],
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
