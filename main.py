from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from quickcart.api.addresses.routes import addresses_router
from quickcart.api.addresses.service import AddressService
from quickcart.api.admin.routes import admin_cache_router
from quickcart.api.banners.routes import admin_banners_router, banners_router
from quickcart.api.banners.service import BannerService
from quickcart.api.categories.routes import categories_router
from quickcart.api.categories.service import CategoryService
from quickcart.api.inventory.routes import inventory_router
from quickcart.api.inventory.service import InventoryService
from quickcart.api.products.routes import products_router
from quickcart.api.products.service import ProductService
from quickcart.config.settings import Settings, settings
from quickcart.database.connection import (
    create_engine,
    create_session_factory,
    init_models,
)
from quickcart.middleware.error import (
    http_exception_handler,
    validation_exception_handler,
)
from quickcart.middleware.timing import add_process_time_header
from quickcart.shared.cache_invalidation import CacheInvalidationManager
from quickcart.shared.core_cache import CacheStore
from quickcart.shared.error_handler import ServiceError
from quickcart.shared.utils import get_logger

logger = get_logger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Assemble the API with one engine, one cache and the services sharing them."""
    engine = create_engine(app_settings)
    session_factory = create_session_factory(engine)
    cache = CacheStore()
    invalidation = CacheInvalidationManager(cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app_settings.DB_CREATE_TABLES:
            await init_models(engine)
        logger.info(f"{app_settings.API_TITLE} started ({app_settings.ENVIRONMENT})")
        yield
        await engine.dispose()

    app = FastAPI(
        title=app_settings.API_TITLE,
        description="API documentation for the QuickCart quick-commerce catalog.",
        version=app_settings.API_VERSION,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.cache = cache
    app.state.cache_invalidation = invalidation
    app.state.category_service = CategoryService(
        session_factory, invalidation, app_settings.DB_QUERY_TIMEOUT
    )
    app.state.product_service = ProductService(
        session_factory, invalidation, app_settings.DB_QUERY_TIMEOUT
    )
    app.state.banner_service = BannerService(
        session_factory, invalidation, app_settings.DB_QUERY_TIMEOUT
    )
    app.state.address_service = AddressService(session_factory)
    app.state.inventory_service = InventoryService(
        session_factory,
        invalidation,
        snapshot_list_limit=app_settings.SNAPSHOT_LIST_LIMIT,
        upload_log_limit=app_settings.UPLOAD_LOG_LIMIT,
    )

    app.include_router(categories_router)
    app.include_router(products_router)
    app.include_router(banners_router)
    app.include_router(admin_banners_router)
    app.include_router(addresses_router)
    app.include_router(inventory_router)
    app.include_router(admin_cache_router)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(ServiceError, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, http_exception_handler)

    app.middleware("http")(add_process_time_header)

    @app.get("/", tags=["App"])
    async def read_root():
        return {"name": app_settings.API_TITLE, "version": app_settings.API_VERSION}

    return app


app = create_app()
