import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from intranet.cache import cache
from intranet.config import settings
from intranet.exceptions import DomainError
from intranet.middleware import TimingMiddleware
from intranet.routers import events, lotteries, metrics, organizations, posts, users, walls

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        await cache.connect()
    except Exception as exc:
        logger.warning("Starting without Redis: %s", exc)
    yield
    await cache.disconnect()


app = FastAPI(
    title="Intranet API",
    description="Walls, posts, comments, events and lotteries for a corporate intranet",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Routers
app.include_router(organizations.router)
app.include_router(users.router)
app.include_router(walls.router)
app.include_router(posts.router)
app.include_router(events.router)
app.include_router(lotteries.router)
app.include_router(metrics.router)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
