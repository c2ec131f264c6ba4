import pytest

from vendhub.core.exceptions import AuthorizationError, DependencyConflictError, NotFoundError, ValidationError
from vendhub.schemas.machine_category import MachineCategoryCreate, MachineCategoryUpdate
from vendhub.schemas.machine_template import MachineTemplateCreate
from vendhub.schemas.product_type import ProductTypeCreate
from vendhub.services import machine_categories, machine_templates, product_types


async def test_create_and_list_categories_by_name(gateway, admin):
    await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Snack", icon="🍿"))
    await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Drink", icon="🥤"))

    items = await machine_categories.list_categories(gateway, admin)

    assert [c.name for c in items] == ["Drink", "Snack"]
    assert items[0].icon == "🥤"
    assert items[0].dependencies is None


async def test_create_category_trims_and_requires_name(gateway, admin):
    created = await machine_categories.create_category(
        gateway, admin, MachineCategoryCreate(name="  Combo  ", description="   ")
    )
    assert created.name == "Combo"
    assert created.description is None

    with pytest.raises(ValidationError) as exc:
        await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="   "))
    assert exc.value.details["field"] == "name"


async def test_operator_cannot_manage_categories(gateway, operator):
    with pytest.raises(AuthorizationError):
        await machine_categories.create_category(gateway, operator, MachineCategoryCreate(name="Snack"))


async def test_update_is_partial_and_idempotent(gateway, admin):
    created = await machine_categories.create_category(
        gateway, admin, MachineCategoryCreate(name="Snack", description="Snack vending machines")
    )
    patch = MachineCategoryUpdate(icon="🍫")

    first = await machine_categories.update_category(gateway, admin, created.id, patch)
    second = await machine_categories.update_category(gateway, admin, created.id, patch)

    assert first.icon == second.icon == "🍫"
    assert first.name == second.name == "Snack"
    assert second.description == "Snack vending machines"


async def test_update_missing_category_is_not_found(gateway, admin):
    with pytest.raises(NotFoundError):
        await machine_categories.update_category(gateway, admin, "missing", MachineCategoryUpdate(name="X"))


async def test_delete_refused_while_product_type_exists(gateway, admin):
    category = await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Snack"))
    await product_types.create_product_type(
        gateway, admin, ProductTypeCreate(name="Chips", machine_category_id=category.id)
    )

    with pytest.raises(DependencyConflictError) as exc:
        await machine_categories.delete_category(gateway, admin, category.id)

    assert exc.value.counts == {"product_types": 1, "global_products": 0, "machine_templates": 0}
    assert "1 product types" in exc.value.message
    assert "global products" not in exc.value.message
    # still there
    assert (await machine_categories.get_category(gateway, admin, category.id)).name == "Snack"


async def test_check_dependencies_counts_every_referencing_table(gateway, admin, snack_catalog):
    category = snack_catalog["category"]
    await machine_templates.create_template(
        gateway,
        admin,
        MachineTemplateCreate(name="6x8 Snack", machine_category_id=category.id, template_data={"rows": 6}),
    )

    deps = await machine_categories.check_dependencies(gateway, category.id)

    assert deps.has_product_types and deps.has_global_products and deps.has_machine_templates
    assert (deps.product_types_count, deps.global_products_count, deps.machine_templates_count) == (1, 1, 1)
    assert deps.blocking


async def test_list_with_dependencies(gateway, admin, snack_catalog):
    await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Drink"))

    items = await machine_categories.list_categories(gateway, admin, include_dependencies=True)
    by_name = {c.name: c for c in items}

    assert by_name["Snack"].dependencies.product_types_count == 1
    assert by_name["Drink"].dependencies.blocking is False


async def test_delete_unreferenced_category(gateway, admin):
    category = await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Sunscreen"))

    result = await machine_categories.delete_category(gateway, admin, category.id)

    assert result.deleted is True
    assert result.count == 1
    assert await machine_categories.list_categories(gateway, admin) == []


async def test_delete_missing_category_is_not_found(gateway, admin):
    with pytest.raises(NotFoundError):
        await machine_categories.delete_category(gateway, admin, "does-not-exist")


async def test_delete_matching_zero_rows_is_not_a_success(gateway, admin, monkeypatch):
    category = await machine_categories.create_category(gateway, admin, MachineCategoryCreate(name="Snack"))

    async def delete_nothing(table, row_id):
        return 0

    # e.g. a row level policy hiding the row from the delete
    monkeypatch.setattr(gateway, "delete", delete_nothing)

    with pytest.raises(NotFoundError):
        await machine_categories.delete_category(gateway, admin, category.id)
