import pytest

from vendhub.core.config import settings
from vendhub.core.exceptions import AuthorizationError, DependencyConflictError, NotFoundError, ValidationError
from vendhub.schemas.global_product import CatalogFilters, GlobalProductCreate, GlobalProductUpdate
from vendhub.schemas.machine_category import MachineCategoryCreate
from vendhub.schemas.product_type import ProductTypeCreate, ProductTypeUpdate
from vendhub.services import company_products, global_products, machine_categories, product_types


async def _drink_catalog(gateway, admin):
    drink = await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Drink", icon="🥤"))
    can = await product_types.create_product_type(
        gateway, admin, ProductTypeCreate(name="12oz Can", machine_category_id=drink.id)
    )
    cola = await global_products.create_global_product(
        gateway,
        admin,
        GlobalProductCreate(
            machine_category_id=drink.id, product_type_id=can.id, brand="Coca-Cola", product_name="Coke Zero"
        ),
    )
    return drink, can, cola


async def test_create_uses_placeholder_image_when_missing(gateway, admin, snack_catalog):
    _, _, cola = await _drink_catalog(gateway, admin)

    assert cola.image == settings.PLACEHOLDER_IMAGE_URL
    assert cola.image == "https://via.placeholder.com/150x150?text=Product"
    assert cola.in_global_catalog is True
    assert cola.in_company_catalog is False


async def test_blank_image_update_falls_back_to_placeholder(gateway, admin, snack_catalog):
    product = snack_catalog["product"]

    updated = await global_products.update_global_product(gateway, admin, product.id, GlobalProductUpdate(image="  "))

    assert updated.image == settings.PLACEHOLDER_IMAGE_URL
    assert updated.brand == "Lay's"


async def test_product_type_must_belong_to_category(gateway, admin, snack_catalog):
    drink, _, _ = await _drink_catalog(gateway, admin)

    with pytest.raises(ValidationError) as exc:
        await global_products.create_global_product(
            gateway,
            admin,
            GlobalProductCreate(
                machine_category_id=drink.id,
                product_type_id=snack_catalog["type"].id,
                brand="Pepsi",
                product_name="Pepsi Max",
            ),
        )
    assert exc.value.details["field"] == "product_type_id"


async def test_create_with_unknown_category_is_not_found(gateway, admin, snack_catalog):
    with pytest.raises(NotFoundError):
        await global_products.create_global_product(
            gateway,
            admin,
            GlobalProductCreate(
                machine_category_id="nope",
                product_type_id=snack_catalog["type"].id,
                brand="X",
                product_name="Y",
            ),
        )


async def test_list_embeds_category_and_type_names(gateway, admin, snack_catalog):
    await _drink_catalog(gateway, admin)

    items = await global_products.list_global_products(gateway, admin)

    assert [p.product_name for p in items] == ["Classic Potato Chips", "Coke Zero"]
    assert items[0].machine_categories.name == "Snack"
    assert items[0].machine_categories.icon == "🍿"
    assert items[0].product_types.name == "Chips"

    drinks = await global_products.list_by_category(gateway, admin, items[1].machine_category_id)
    assert [p.brand for p in drinks] == ["Coca-Cola"]


async def test_global_product_writes_need_admin(gateway, operator, snack_catalog):
    with pytest.raises(AuthorizationError):
        await global_products.update_global_product(
            gateway, operator, snack_catalog["product"].id, GlobalProductUpdate(brand="Other")
        )


async def test_delete_refused_once_imported(gateway, admin, operator, snack_catalog):
    product = snack_catalog["product"]
    await company_products.import_from_global(gateway, operator, product.id, operator.company_id)

    with pytest.raises(DependencyConflictError) as exc:
        await global_products.delete_global_product(gateway, admin, product.id)

    assert exc.value.counts == {"company_products": 1}


async def test_delete_product_type_in_use_is_refused(gateway, admin, snack_catalog):
    with pytest.raises(DependencyConflictError) as exc:
        await product_types.delete_product_type(gateway, admin, snack_catalog["type"].id)
    assert exc.value.counts == {"global_products": 1}

    await global_products.delete_global_product(gateway, admin, snack_catalog["product"].id)
    result = await product_types.delete_product_type(gateway, admin, snack_catalog["type"].id)
    assert result.deleted and result.count == 1


async def test_product_types_by_category(gateway, admin, snack_catalog):
    category = snack_catalog["category"]
    await product_types.create_product_type(gateway, admin, ProductTypeCreate(name="Candy Bar", machine_category_id=category.id))
    await _drink_catalog(gateway, admin)

    names = [t.name for t in await product_types.list_by_category(gateway, admin, category.id)]
    assert names == ["Candy Bar", "Chips"]
    assert len(await product_types.list_product_types(gateway, admin)) == 3

    renamed = await product_types.update_product_type(
        gateway, admin, snack_catalog["type"].id, ProductTypeUpdate(name="Potato Chips")
    )
    assert renamed.name == "Potato Chips"
    assert renamed.machine_category_id == category.id


async def test_browse_groups_by_category_and_filters(gateway, admin, operator, snack_catalog):
    drink, can, _ = await _drink_catalog(gateway, admin)
    await global_products.create_global_product(
        gateway,
        admin,
        GlobalProductCreate(
            machine_category_id=drink.id,
            product_type_id=can.id,
            brand="Hidden",
            product_name="Not Offered",
            in_global_catalog=False,
        ),
    )

    groups = await global_products.browse_catalog(gateway, operator, CatalogFilters())
    assert [g.category_name for g in groups] == ["Drink", "Snack"]
    assert [p.product_name for p in groups[0].products] == ["Coke Zero"]
    assert groups[0].icon == "🥤"
    assert groups[0].products[0].product_types.name == "12oz Can"

    searched = await global_products.browse_catalog(gateway, operator, CatalogFilters(search="COKE"))
    assert [g.category_name for g in searched] == ["Drink"]

    by_brand = await global_products.browse_catalog(gateway, operator, CatalogFilters(search="lay"))
    assert [p.brand for g in by_brand for p in g.products] == ["Lay's"]

    by_type = await global_products.browse_catalog(
        gateway, operator, CatalogFilters(product_type_id=snack_catalog["type"].id)
    )
    assert [g.machine_category_id for g in by_type] == [snack_catalog["category"].id]

    assert await global_products.browse_catalog(gateway, operator, CatalogFilters(search="zzz")) == []


async def test_browse_requires_operator(gateway, viewer, snack_catalog):
    with pytest.raises(AuthorizationError):
        await global_products.browse_catalog(gateway, viewer, CatalogFilters())


async def test_product_type_in_use_cannot_move_category(gateway, admin, snack_catalog):
    drink = await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Drink"))
    chips = snack_catalog["type"]

    with pytest.raises(ValidationError) as exc:
        await product_types.update_product_type(
            gateway, admin, chips.id, ProductTypeUpdate(machine_category_id=drink.id)
        )
    assert exc.value.details["field"] == "machine_category_id"

    stored = await product_types.get_product_type(gateway, admin, chips.id)
    product = await global_products.get_global_product(gateway, admin, snack_catalog["product"].id)
    assert stored.machine_category_id == product.machine_category_id == snack_catalog["category"].id

    # same category and renames are still fine
    same = await product_types.update_product_type(
        gateway, admin, chips.id, ProductTypeUpdate(name="Crisps", machine_category_id=snack_catalog["category"].id)
    )
    assert same.name == "Crisps"


async def test_unused_product_type_can_move_category(gateway, admin, snack_catalog):
    drink = await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Drink"))
    spare = await product_types.create_product_type(
        gateway, admin, ProductTypeCreate(name="Energy Drink", machine_category_id=snack_catalog["category"].id)
    )

    moved = await product_types.update_product_type(
        gateway, admin, spare.id, ProductTypeUpdate(machine_category_id=drink.id)
    )
    assert moved.machine_category_id == drink.id
