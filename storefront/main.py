import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import settings
from storefront.database import engine
from storefront.infrastructure.db_schema import metadata
from storefront.presentation.api import router
from storefront.presentation.errors import register_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    if settings.CREATE_TABLES_ON_STARTUP:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Таблицы созданы")

    yield

    await engine.dispose()
    logger.info("Приложение останавливается...")


app = FastAPI(
    title="Storefront API",
    description="Каталог, корзина, заказы, отзывы и избранное",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Storefront API работает"}


@app.get("/health")
async def health():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}
