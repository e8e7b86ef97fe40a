from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

# ✅ logging (one place, level from .env)
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

from database.db import Base, engine

# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import student_assessments, teacher_assessments, teacher_marks, teacher_subjects

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS for the portal front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ latency header (X-Latency-Ms)
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (one JSON error format)
add_error_handlers(app)

# ✅ /v1 routers
app.include_router(student_assessments.router, prefix="/v1")
app.include_router(teacher_assessments.router, prefix="/v1")
app.include_router(teacher_marks.router,       prefix="/v1")
app.include_router(teacher_subjects.router,    prefix="/v1")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}


@app.on_event("startup")
def _create_tables():
    # production schema is managed by the DBA; dev gets tables created on boot
    if settings.ENV == "dev":
        Base.metadata.create_all(bind=engine)
        logger.info("Dev schema ensured")


# ✅ root
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} {settings.APP_VERSION}"}
