from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from celltech.config import get_settings
from celltech.database import engine, Base
from celltech.models import product, sale, user  # noqa: F401  (register tables)
from celltech.api import auth, users, products, sales, statistics, health
from celltech.api.errors import register_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up application...")
    
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")
    
    yield
    
    logger.info("Shutting down application...")


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Backend for the Cell Tech phone shop:
    
    - **Auth**: Registration and JWT login (bcrypt password hashing)
    - **Products**: CRUD for the phone catalog with stock tracking
    - **Sales**: Recording sales against live inventory
    - **Statistics**: Daily sales totals over a trailing window
    
    ## Stock Handling
    A sale decrements stock with one conditional update (`stock >= quantity`),
    so concurrent sales cannot oversell. The stock change and the sale record
    are committed in the same transaction.
    
    ## Statistics
    Totals are grouped per calendar day (UTC) and zero-filled, so a chart
    receives one entry for every day of the requested window.
    """,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router, prefix="/api/v1")
app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(products.router, prefix="/api/v1")
app.include_router(sales.router, prefix="/api/v1")
app.include_router(statistics.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "message": "Welcome to Cell Tech!",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/api/v1/health"
    }
