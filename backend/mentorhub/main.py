import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mentorhub.core.config import settings
from mentorhub.core.errors import ServiceError
from mentorhub.routers import (
    admin_auth,
    hour_adjustments,
    mentors,
    notifications,
    reports,
    seasons,
    shifts,
    signups,
    students,
    templates,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("mentorhub.api")

app = FastAPI(title="Mentor Hub API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        msg = first.get("msg", "Invalid value")
        detail = f"{field}: {msg}" if field else msg
    else:
        detail = "Invalid request"
    return JSONResponse(status_code=400, content={"detail": detail})


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(admin_auth.router)
app.include_router(mentors.router)
app.include_router(shifts.router)
app.include_router(templates.router)
app.include_router(signups.router)
app.include_router(reports.router)
app.include_router(students.router)
app.include_router(seasons.router)
app.include_router(hour_adjustments.router)
app.include_router(notifications.router)


@app.get("/health")
def health():
    return {"status": "ok"}
