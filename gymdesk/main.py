import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from gymdesk.api import api_router
from gymdesk.config import settings
from gymdesk.database import create_db_and_tables
from gymdesk.services.live import live_queries
from gymdesk.services.notifications import expiry_notifier

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="GymDesk",
    description="Members, trainers, attendance and plans for a single gym",
    version="1.0.0",
)

# CORS middleware configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_PREFIX)

@app.on_event("startup")
async def on_startup():
    create_db_and_tables()
    logger.info("GymDesk started (%s)", settings.ENVIRONMENT)

@app.on_event("shutdown")
async def on_shutdown():
    expiry_notifier.stop()
    live_queries.clear()

@app.get("/")
async def root():
    return {"message": "Welcome to GymDesk API"}

def run():
    import uvicorn
    uvicorn.run("gymdesk.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
