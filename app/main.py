import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.database import create_tables
from app.logging_config import configure_logging
from app.middleware.gate import RequestGate
from app.routers.auth import router as auth_router
from app.routers.person import router as person_router
from app.services.tokens import check_security_config
from app.utils.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    check_security_config()
    await create_tables()
    logger.info("Person auth service started")
    yield


app = FastAPI(
    title="Person Auth API",
    description="Account registration, token login and person CRUD",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestGate)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(person_router)
