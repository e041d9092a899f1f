from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings
from database.db import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# desliga o log de debug das bibliotecas HTTP
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import grade_reports, report_viewer


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.APP_TITLE} iniciado (env={settings.ENV})")
    yield


app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# ✅ CORS (cliente web)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ mede a latência (header X-Latency-Ms)
app.add_middleware(TimingMiddleware)

# ✅ handlers globais (formato JSON único de erro)
add_error_handlers(app)

# ✅ registro dos routers
app.include_router(grade_reports.router)   # /api/grade-reports
app.include_router(report_viewer.router)   # /report/{report_id}


# ✅ healthcheck
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}
