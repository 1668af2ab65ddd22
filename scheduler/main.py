import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from scheduler.config import configure_logging
from scheduler.database import engine, create_tables
from scheduler.exceptions import SchedulerError, StoreError
from scheduler.routers import auth as auth_router
from scheduler.routers import reservations, schedule

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: logging, then tables
    configure_logging()
    await create_tables(engine)
    logger.info("Vaccine scheduler API started")
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Vaccine Reservation Scheduler",
    description="Caregiver availability, vaccine inventory and patient reservations",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchedulerError)
async def scheduler_error_handler(request: Request, exc: SchedulerError):
    if isinstance(exc, StoreError):
        logger.error("Store error on %s %s: %s", request.method, request.url.path, exc.__cause__)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Unhandled store error on %s %s", request.method, request.url.path, exc_info=exc)
    error = StoreError()
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message, "error": error.code},
    )


app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
app.include_router(schedule.router, prefix="/api", tags=["Schedule"])
app.include_router(reservations.router, prefix="/api/reservations", tags=["Reservations"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "vaccine-scheduler"}
