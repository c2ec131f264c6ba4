import asyncio
import os

# Settings are read at import time; the hosted backend vars are mandatory.
os.environ.setdefault("SUPABASE_URL", "https://catalog.test.local")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("JWT_AUDIENCE", "authenticated")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from vendhub.core.database import create_engine
from vendhub.core.deps import get_base_gateway
from vendhub.core.principal import Principal
from vendhub.core.security import create_access_token
from vendhub.gateway import SqlGateway
from vendhub.main import app
from vendhub.models import Base
from vendhub.schemas.global_product import GlobalProductCreate
from vendhub.schemas.machine_category import MachineCategoryCreate
from vendhub.schemas.product_type import ProductTypeCreate
from vendhub.services import global_products, machine_categories, product_types

COMPANY_A = "company-a"
COMPANY_B = "company-b"


async def _create_tables(engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def _sqlite_gateway(tmp_path) -> SqlGateway:
    # NullPool: every gateway call opens its own connection in the running loop
    engine = create_engine(f"sqlite:///{tmp_path / 'catalog.db'}", poolclass=NullPool)
    return SqlGateway(engine)


@pytest.fixture
async def gateway(tmp_path):
    gw = _sqlite_gateway(tmp_path)
    await _create_tables(gw._engine)
    yield gw
    await gw.close()


@pytest.fixture
def admin():
    return Principal(user_id="admin-1", email="admin@vendhub.test", is_admin=True, is_operator=True)


@pytest.fixture
def operator():
    return Principal(user_id="op-1", email="op@vendhub.test", company_id=COMPANY_A, is_operator=True)


@pytest.fixture
def other_operator():
    return Principal(user_id="op-2", email="op2@vendhub.test", company_id=COMPANY_B, is_operator=True)


@pytest.fixture
def viewer():
    return Principal(user_id="viewer-1", email="viewer@vendhub.test")


def make_token(user_id: str, roles=(), company_id=None, email=None) -> str:
    app_metadata = {"roles": list(roles)}
    if company_id:
        app_metadata["company_id"] = company_id
    return create_access_token(user_id, extra_claims={"email": email, "app_metadata": app_metadata})


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_headers(make_token("admin-1", roles=["admin"], email="admin@vendhub.test"))


@pytest.fixture
def operator_headers():
    return auth_headers(make_token("op-1", roles=["operator"], company_id=COMPANY_A, email="op@vendhub.test"))


@pytest.fixture
def client(tmp_path):
    gw = _sqlite_gateway(tmp_path)
    asyncio.run(_create_tables(gw._engine))
    app.dependency_overrides[get_base_gateway] = lambda: gw
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def snack_catalog(gateway, admin):
    """One category with one product type and one global product."""
    category = await machine_categories.create_category(
        gateway, admin, MachineCategoryCreate(name="Snack", description="Snack vending machines", icon="🍿")
    )
    chips = await product_types.create_product_type(
        gateway, admin, ProductTypeCreate(name="Chips", machine_category_id=category.id)
    )
    product = await global_products.create_global_product(
        gateway,
        admin,
        GlobalProductCreate(
            machine_category_id=category.id,
            product_type_id=chips.id,
            brand="Lay's",
            product_name="Classic Potato Chips",
            image="https://img.test/lays.png",
        ),
    )
    return {"category": category, "type": chips, "product": product}
