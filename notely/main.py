import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from notely.core.config import settings
from notely.core.database import engine, Base
from notely.core.exceptions import NotelyError
from notely.models import user, page, block, tag  # noqa: F401 (tables)
from notely.routers import health, auth, profile, pages, blocks, tags, storage

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Notely API",
    version="1.0.0"
)

@app.exception_handler(NotelyError)
async def handle_notely_error(request: Request, exc: NotelyError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message} {exc.context}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError):
    # jamais de SQL ou de stacktrace côté client
    logger.error(f"{request.method} {request.url.path}: database error: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal database error"})

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(pages.router)
app.include_router(blocks.router)
app.include_router(tags.router)
app.include_router(storage.router)

# Fichiers uploadés en local
if settings.STORAGE_BACKEND == "local":
    app.mount(settings.UPLOAD_BASE_URL, StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")
