from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from nursery.api import activities, config, reminders
from nursery.api.config import VERSION
from nursery.core.database import init_db
from nursery.services.scheduler import start_scheduler, stop_scheduler

# Register all tables on Base before init_db
import nursery.models  # noqa: F401


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    # Startup
    await init_db()
    start_scheduler()
    yield
    # Shutdown
    stop_scheduler()


app = FastAPI(
    title="Nursery Reminders",
    description="Learns a baby's care routine from the activity log and schedules smart reminders",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(config.router)
app.include_router(activities.router)
app.include_router(reminders.router)


@app.get("/")
async def root():
    """Redirect root to the API docs."""
    return RedirectResponse(url="/docs")
