# /peer-review-backend/peer_review/main.py

import logging

# --- Core FastAPI Imports ---
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

# --- Application-specific Imports ---
from .config import CORS_ALLOW_ORIGINS, LOG_LEVEL
from .db.database import init_db
from .routers import assignments_router, reviews_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Runs once at startup.
    init_db()
    yield


app = FastAPI(
    title="Peer Review Backend API",
    description="Assigns, tracks and grades peer reviews between teams and students.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Router Inclusion ---
app.include_router(assignments_router.router, prefix="/api/assignments", tags=["Assignments"])
app.include_router(reviews_router.router, prefix="/api/reviews", tags=["Reviews"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Peer Review Backend is running!", "version": app.version}
