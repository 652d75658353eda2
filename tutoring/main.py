import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tutoring.api import attendance, auth, books, grades, parents, payments, students, videos
from tutoring.core.config import settings
from tutoring.core.scan_service import AttendanceScanner, run_cache_cleanup
from tutoring.db import Base
from tutoring.db.gateway import CircuitBreaker, GatewayError, QueryGateway
from tutoring.db.session import engine

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)

    gateway = QueryGateway(
        engine,
        max_retries=settings.DB_MAX_RETRIES,
        retry_delay=settings.DB_RETRY_DELAY_SECONDS,
        timeout=settings.DB_TIMEOUT_SECONDS,
        breaker=CircuitBreaker(settings.DB_BREAKER_THRESHOLD, settings.DB_BREAKER_COOLDOWN_SECONDS),
    )
    app.state.gateway = gateway
    app.state.scanner = AttendanceScanner.from_settings(gateway, settings)

    cleanup_task = asyncio.create_task(
        run_cache_cleanup(app.state.scanner, settings.CACHE_CLEANUP_INTERVAL_SECONDS)
    )
    logger.info(f"🚀 Started, {settings.LESSONS_PER_MONTH} lessons per billing month")
    try:
        yield
    finally:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error(f"❌ {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "قاعدة البيانات غير متاحة حاليا، حاول مرة أخرى"})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(students.router, prefix="/api/students", tags=["students"])
app.include_router(parents.router, prefix="/api/parents", tags=["parents"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["attendance"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])
app.include_router(grades.router, prefix="/api/grades", tags=["grades"])
app.include_router(videos.router, prefix="/api/videos", tags=["videos"])
app.include_router(books.router, prefix="/api/books", tags=["books"])
