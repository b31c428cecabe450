"""FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fiatlux import __version__
from fiatlux.api.routes import router

app = FastAPI(
    title="fiatlux",
    description="Offline scripture lookup and search",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "fiatlux",
        "version": __version__,
        "docs": "/docs",
        "api": "/api/v1",
    }
