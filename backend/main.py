"""
Blueprint Factory — FastAPI application entrypoint.

Start the server:
    uvicorn main:app --reload --port 8000

API Overview:
    POST   /api/ai/analyze-goal                      — Goal clarification turn
    POST   /api/ai/goal-assistant                    — Goal-setting coach chat
    POST   /api/ai/generate-blueprint                — Blueprint from a conversation
    POST   /api/detailed-analysis                    — Blueprint statistics + AI insights
    POST   /api/branding/extract                     — Branding data from blueprints
    POST   /api/generate-branding-langchain          — Branding statements
    POST   /api/admin/migrate                        — Seed gallery sample data
    GET    /api/community/goals                      — Public goals feed
    POST   /api/community/reactions                  — React to a public goal
    DELETE /api/community/reactions                  — Remove a reaction
    POST   /api/goals                                — Create a goal
    GET    /api/goals/{id}                           — Goal with journals
    PATCH  /api/goals/{id}                           — Update a goal
    DELETE /api/goals/{id}                           — Delete a goal
    POST   /api/goals/{id}/convert-to-blueprint      — Goal → blueprint
    POST   /api/journals                             — Add a journal entry
    GET    /api/blueprints/                          — List own blueprints
    POST   /api/blueprints/                          — Create a blueprint
    GET    /api/blueprints/{id}                      — Get a blueprint
    PUT    /api/blueprints/{id}                      — Update a blueprint
    DELETE /api/blueprints/{id}                      — Delete a blueprint
    GET    /api/gallery                              — Public blueprints
    GET    /api/gallery/{id}                         — Public blueprint (counts a view)
    GET    /api/auth/session                         — Auth guard session check
    GET    /api/profile                              — Demo profile
    PATCH  /api/profile                              — Update profile
    POST   /api/profile/badges                       — Award a badge
    PATCH  /api/profile/stats                        — Update profile stats
    PUT    /api/profile/blueprints/{id}              — Save blueprint locally
    GET    /api/profile/blueprints/{id}              — Load local blueprint
    GET    /api/profile/storage                      — Storage diagnostics
    POST   /api/follows                              — Follow
    DELETE /api/follows                              — Unfollow
    GET    /api/follows/{user_id}                    — Followers / following
    GET    /api/follows/{follower_id}/{following_id} — Follow status
    GET    /api/health                               — Health check
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
from api.blueprint_routes import blueprint_router
from api.community_routes import community_router
from api.errors import ApiError, api_error_handler
from api.goal_routes import goal_router
from api.profile_routes import profile_router
from api.routes import router
from database import init_db, close_db

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    logger.info("Blueprint Factory API starting up...")
    await init_db()
    logger.info("Database initialized.")
    if not config.is_openai_configured():
        logger.warning("OPENAI_API_KEY is not set; AI endpoints will fail or use fallbacks")
    yield
    await close_db()
    logger.info("Blueprint Factory API shutting down...")


app = FastAPI(
    title="Blueprint Factory API",
    description=(
        "Backend for Blueprint Factory (청사진 제작소): goal blueprints, "
        "AI goal coaching and analysis, personal branding, and the "
        "community goal feed."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: allow all origins in development; tighten in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)

# Mount REST routes under /api prefix
app.include_router(router, prefix="/api")
app.include_router(community_router, prefix="/api")
app.include_router(goal_router, prefix="/api")
app.include_router(blueprint_router, prefix="/api")
app.include_router(profile_router, prefix="/api")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
