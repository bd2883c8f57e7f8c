import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskflow.config import settings
from taskflow.routers import auth, mis_report, designations, purchase
from taskflow.services.cache import TimedCache
from taskflow.services.purchase import PurchaseService
from taskflow.services.scheduler import PurchaseCacheScheduler
from taskflow.services.sheets_client import SheetsClient

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Taskflow API")

# Shared purchase dashboard state, handed to routes through dependencies
app.state.purchase_cache = TimedCache(ttl_seconds=settings.PURCHASE_CACHE_TTL)
app.state.purchase_service = PurchaseService(SheetsClient())
purchase_scheduler = PurchaseCacheScheduler(app.state.purchase_service, app.state.purchase_cache)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(mis_report.router)
app.include_router(designations.router)
app.include_router(purchase.router)

# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Start the purchase cache scheduler when the application starts"""
    logger.info("Starting Taskflow API...")
    purchase_scheduler.start()

@app.on_event("shutdown")
async def shutdown_event():
    """Stop the purchase cache scheduler when the application shuts down"""
    logger.info("Shutting down Taskflow API...")
    purchase_scheduler.stop()

# Root route
@app.get("/")
def read_root():
    return {"message": "Taskflow API"}

@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/scheduler/status")
def get_scheduler_status():
    """Get scheduler status and job information"""
    return purchase_scheduler.get_status()
