from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import IntegrityError
import logging

from .exceptions import PeerLearnException

logger = logging.getLogger(__name__)


def _error_body(code: str, message: str, detail=None, type_name: str = None) -> dict:
    return {"error": code, "message": message, "detail": detail, "type": type_name}


async def peerlearn_exception_handler(request: Request, exc: PeerLearnException):
    """Handle domain exceptions"""
    if exc.status_code >= 500:
        logger.error(f"PeerLearn error: {exc.message} - Path: {request.url.path}")
    else:
        logger.info(f"{exc.code}: {exc.message} - Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(_error_body(exc.code, exc.message, exc.detail, exc.__class__.__name__))
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed ids, status values and bodies are reported as invalid arguments"""
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(_error_body("invalid_argument", "Validation Error", exc.errors(), "InvalidArgument"))
    )

async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error: {exc.orig} - Path: {request.url.path}")
    return JSONResponse(
        status_code=409,
        content=_error_body("conflict", "Duplicate entry", None, "Conflict")
    )

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unexpected error: {str(exc)} - Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=_error_body("internal_error", "Internal server error", None, "InternalError")
    )

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(PeerLearnException, peerlearn_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
