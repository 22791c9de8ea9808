import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from config import settings
from database import engine, async_session, init_db
from routers import audits, answers, questions, dashboard, export
from services.question_seed import seed_questions
from services.record_store import RecordStore

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initialising database schema...")
    await init_db(engine)
    app.state.store = RecordStore(async_session)
    if settings.seed_on_startup:
        await seed_questions(app.state.store, settings.questions_file or None)
    yield
    await engine.dispose()

app = FastAPI(
    title="AuditShield",
    version="1.0.0",
    description="ISO/IEC 27001 audit checklist and compliance scoring",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(questions.router, prefix="/api")
app.include_router(audits.router, prefix="/api")
app.include_router(answers.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(export.router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "auditshield"}
