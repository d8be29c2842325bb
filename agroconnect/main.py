from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from agroconnect.api import buyer, dashboard, drafts, health, images, products
from agroconnect.core.config import settings
from agroconnect.core.exceptions import register_exception_handlers
from agroconnect.core.logging import setup_logging
from agroconnect.db.init import init_db

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.bucket_path.mkdir(parents=True, exist_ok=True)
    init_db()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started ({settings.ENVIRONMENT})")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend API for the AgroConnect Nigeria farmer/buyer marketplace",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers. Images must come before the product detail routes.
app.include_router(images.router, prefix="/api/farmer/products/images", tags=["images"])
app.include_router(products.router, prefix="/api/farmer/products", tags=["products"])
app.include_router(drafts.router, prefix="/api/farmer/drafts", tags=["drafts"])
app.include_router(dashboard.router, prefix="/api/farmer/dashboard", tags=["dashboard"])
app.include_router(buyer.router, prefix="/api/buyer", tags=["buyer"])
app.include_router(health.router, prefix="/api", tags=["health"])

# Public, read-only view of the object storage buckets
app.mount("/storage", StaticFiles(directory=Path(settings.STORAGE_ROOT), check_dir=False), name="storage")


@app.get("/")
def read_root():
    return {"message": "Welcome to AgroConnect Nigeria API"}
