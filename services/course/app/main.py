import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.auth.router import router as auth_router
from app.config import Settings
from app.database import close_db, init_db
from app.lms.router import router as lms_router
from app.player.router import router as player_router
from app.progress.router import router as progress_router
from app.rate_limit import limiter
from shared.middleware import error_envelope_middleware, request_id_middleware


def get_settings() -> Settings:
    return Settings()


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(levelname)s:%(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.course_database_url)
    logger.info(
        "Course service starting (env=%s, identity_provider=%s)",
        settings.env_name, settings.identity_provider,
    )

    yield

    # Shutdown
    await close_db()


SWAGGER_DESCRIPTION = """\
## LearnPath Course Service

Courses organised into chapters of third-party videos (YouTube / Vimeo),
per-video completion tracking and progress dashboards.

### Domain Tags

| Tag | Description |
|-----|-------------|
| **Auth** | Login / logout / current user (session cookie) |
| **LMS** | Catalog, course pages, enrollment; course/chapter/video admin |
| **Progress** | Mark videos complete, dashboard percentages |
| **Player** | Video page with embed reference and chapter sidebar |

### Authentication

`POST /api/v1/auth/login` sets an httpOnly `_session` cookie. Every other
endpoint (except the health check) accepts that cookie or the same token as
`Authorization: Bearer <token>`.

### Progress

A course's progress is completed videos / total videos (0% for a course with
no videos). Overall progress pools the video counts of every enrolled course.
"""


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="LearnPath Course Service",
        version="0.1.0",
        description=SWAGGER_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Last added = outermost; CORS wraps everything, including 429s.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(lms_router, prefix="/api/v1")
    app.include_router(progress_router, prefix="/api/v1")
    app.include_router(player_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "service": "course"}

    return app


app = create_app()
