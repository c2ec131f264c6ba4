import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vendhub.core.config import settings
from vendhub.core.errors import register_exception_handlers
from vendhub.gateway import create_gateway
from vendhub.routers import admin, auth, catalog, company, health

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="VendHub Catalog API",
    description="Machine categories, global product catalog and company catalogs for vending operators",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router, prefix="/health")
app.include_router(auth.router, prefix="/auth")
app.include_router(admin.router, prefix="/admin")
app.include_router(catalog.router, prefix="/catalog")
app.include_router(company.router, prefix="/company")


@app.on_event("startup")
async def startup():
    app.state.gateway = create_gateway(settings)
    logger.info("Catalog gateway ready: %s", type(app.state.gateway).__name__)


@app.on_event("shutdown")
async def shutdown():
    gateway = getattr(app.state, "gateway", None)
    if gateway is not None:
        await gateway.close()
