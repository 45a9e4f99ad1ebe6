import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from pairmap.logic.errors import (
    FeedPairConflict,
    NoMatchingFeedCircuit,
    OverlapError,
    PairMapError,
    SplicePairConflict,
)

logger = logging.getLogger(__name__)

_CONFLICT_ERRORS = (OverlapError, FeedPairConflict, NoMatchingFeedCircuit, SplicePairConflict)


def status_for(exc: PairMapError) -> int:
    if isinstance(exc, _CONFLICT_ERRORS):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def error_body(exc: PairMapError) -> dict:
    return {"code": exc.code, "message": exc.message, "details": jsonable_encoder(exc.details)}


async def _pairmap_error_handler(request: Request, exc: PairMapError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status_for(exc), content=error_body(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PairMapError, _pairmap_error_handler)
