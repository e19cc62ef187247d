import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shiftdesk.api.routes import calendar, centers, members, shift_assignments, slots, workshifts
from shiftdesk.core.config import settings
from shiftdesk.db.database import engine
from shiftdesk.db.models import Base

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"ShiftDesk API started ({settings.ENV})")
    yield


app = FastAPI(title="ShiftDesk API", version="0.1.0", debug=settings.DEBUG, lifespan=lifespan)

app.include_router(centers.router, prefix="/api/v1")
app.include_router(workshifts.router, prefix="/api/v1")
app.include_router(shift_assignments.router, prefix="/api/v1")
app.include_router(slots.router, prefix="/api/v1")
app.include_router(members.router, prefix="/api/v1")
app.include_router(calendar.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
