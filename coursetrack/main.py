import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from coursetrack.core.config import LOG_LEVEL
from coursetrack.core.errors import OperationFailed, Unauthorized
from coursetrack.core.logging_middleware import LoggingMiddleware
from coursetrack.db.init_db import init_db

from coursetrack.routers.assignments import router as assignments_router
from coursetrack.routers.auth import router as auth_router
from coursetrack.routers.classes import router as classes_router
from coursetrack.routers.courses import router as courses_router
from coursetrack.routers.enrollments import router as enrollments_router
from coursetrack.routers.progress import router as progress_router
from coursetrack.routers.submissions import router as submissions_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Coursetrack")

# Middleware
app.add_middleware(LoggingMiddleware)


# Service errors
@app.exception_handler(Unauthorized)
def unauthorized_handler(request: Request, exc: Unauthorized):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(OperationFailed)
def operation_failed_handler(request: Request, exc: OperationFailed):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message},
    )


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(courses_router, prefix="/courses", tags=["courses"])
app.include_router(classes_router, prefix="/classes", tags=["classes"])
app.include_router(enrollments_router, prefix="/enrollments", tags=["enrollments"])
app.include_router(assignments_router, tags=["assignments"])
app.include_router(submissions_router, tags=["submissions"])
app.include_router(progress_router, prefix="/progress", tags=["progress"])
