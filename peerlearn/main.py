from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import settings
from .core import database
from .core.cache import cache_manager
from .core.error_handlers import register_exception_handlers
from .core.logging import setup_logging

from .routers import auth, health, subjects, tutoring_requests
from .routers.chat import chat_router

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting PeerLearn API")

    database.init_engine()
    await cache_manager.initialize()

    yield

    logger.info("Shutting down PeerLearn API")
    await cache_manager.close()
    await database.dispose_engine()
    logger.info("Shutdown complete")

app = FastAPI(
    title=settings.app_name,
    description="Peer-to-peer tutoring requests and chat",
    version=settings.app_version,
    lifespan=lifespan
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {process_time:.3f}s")
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(subjects.router, prefix=settings.api_prefix)
app.include_router(tutoring_requests.router, prefix=settings.api_prefix)
app.include_router(chat_router, prefix=settings.api_prefix)

@app.get("/")
async def root():
    return {
        "message": "PeerLearn API",
        "version": settings.app_version,
        "status": "active"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("peerlearn.main:app", host="0.0.0.0", port=8000, reload=settings.environment == "development")
