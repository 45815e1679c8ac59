import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import FRONTEND_URL, NOTIFICATION_DRAIN_TIMEOUT_SECONDS
from .database import Base, engine
from .domain.appointments.router import router as appointments_router
from .domain.chat.router import router as chat_router
from .domain.orders.router import router as orders_router
from .domain.records.router import router as records_router
from .domain.users.router import router as users_router
from .notifications.dispatcher import build_dispatcher

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Silence per-request logs from the Twilio/OneSignal HTTP clients
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    app.state.dispatcher = build_dispatcher()
    logger.info("Notification dispatcher ready")

    yield

    logger.info("Application shutting down...")
    await app.state.dispatcher.drain(timeout=NOTIFICATION_DRAIN_TIMEOUT_SECONDS)


app = FastAPI(title="MCaid API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(users_router)
app.include_router(appointments_router)
app.include_router(records_router)
app.include_router(orders_router)
app.include_router(chat_router)


@app.get("/")
def root():
    return {"message": "MCaid API is running"}
