# aspas/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aspas.config import settings
from aspas.core.bootstrap import ensure_default_admin
from aspas.core.db import close_db, init_db
from aspas.core.errors import register_error_handlers
from aspas.core.ratelimit import build_rate_limit_store

from aspas.api.routers import auth, health, phrases, projects, tasks

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Login attempt counters (memory by default, Redis when RATE_LIMIT_REDIS_URL is set)
app.state.rate_limit_store = build_rate_limit_store()


@app.on_event("startup")
async def on_startup():
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()
    await app.state.rate_limit_store.close()


app.include_router(auth.router, prefix="/api")
app.include_router(projects.router, prefix="/api")
app.include_router(tasks.router, prefix="/api")
app.include_router(phrases.router, prefix="/api")
app.include_router(health.router, prefix="/api")
