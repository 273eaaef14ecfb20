import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rest_provider.config import settings
from rest_provider.errors import RestError, error_payload, error_status
from rest_provider.middleware import RequestContextMiddleware
from rest_provider.routers import tasks

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(
    title="REST Provider",
    description="Maps REST requests onto callback-style services",
    version="1.0.0",
)

# Middleware
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(tasks.router)


@app.exception_handler(RestError)
async def rest_error_handler(request: Request, exc: RestError):
    status = error_status(exc)
    return JSONResponse(error_payload(exc, status), status_code=status)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0", "env": settings.APP_ENV}
