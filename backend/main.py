# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import SessionLocal, init_db

# Router imports
from routes.auth import router as auth_router, seed_admin
from routes.categories import router as categories_router
from routes.products import router as products_router
from routes.variants import router as variants_router
from routes.orders import router as orders_router
from routes.stats import router as stats_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables and the bootstrap admin before serving
    init_db()
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()
    logger.info("%s POS API ready", settings.STORE_NAME)
    yield


app = FastAPI(title="Fashion Arena POS API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(auth_router)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(variants_router)
app.include_router(orders_router)
app.include_router(stats_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Fashion Arena POS API is running"}
