from conftest import auth_headers, make_token


def _seed_snack(client, admin_headers):
    category = client.post(
        "/admin/machine-categories", json={"name": "Snack", "icon": "🍿"}, headers=admin_headers
    ).json()
    chips = client.post(
        "/admin/product-types",
        json={"name": "Chips", "machine_category_id": category["id"]},
        headers=admin_headers,
    ).json()
    product = client.post(
        "/admin/global-products",
        json={
            "machine_category_id": category["id"],
            "product_type_id": chips["id"],
            "brand": "Lay's",
            "product_name": "Classic Potato Chips",
        },
        headers=admin_headers,
    ).json()
    return category, chips, product


def test_health_reports_backend(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "backend": "connected", "gateway": "sql"}


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers=auth_headers("not-a-jwt")).status_code == 401


def test_me_returns_roles(client, operator_headers):
    r = client.get("/auth/me", headers=operator_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["user_id"] == "op-1"
    assert body["company_id"] == "company-a"
    assert body["is_operator"] is True
    assert body["is_admin"] is False


def test_admin_creates_category(client, admin_headers):
    r = client.post("/admin/machine-categories", json={"name": "Drink", "icon": "🥤"}, headers=admin_headers)
    assert r.status_code == 201
    created = r.json()
    assert created["name"] == "Drink"

    listed = client.get("/admin/machine-categories", headers=admin_headers).json()
    assert [c["name"] for c in listed] == ["Drink"]


def test_operator_cannot_create_category(client, operator_headers):
    r = client.post("/admin/machine-categories", json={"name": "Drink"}, headers=operator_headers)
    assert r.status_code == 403
    assert r.json()["code"] == "AUTHORIZATION_ERROR"


def test_blank_name_is_422(client, admin_headers):
    r = client.post("/admin/machine-categories", json={"name": "   "}, headers=admin_headers)
    assert r.status_code == 422
    assert r.json()["code"] == "VALIDATION_ERROR"


def test_category_delete_conflict_reports_counts(client, admin_headers):
    category, _, _ = _seed_snack(client, admin_headers)

    deps = client.get(f"/admin/machine-categories/{category['id']}/dependencies", headers=admin_headers).json()
    assert deps["product_types_count"] == 1
    assert deps["global_products_count"] == 1
    assert deps["has_machine_templates"] is False

    r = client.delete(f"/admin/machine-categories/{category['id']}", headers=admin_headers)
    assert r.status_code == 409
    body = r.json()
    assert body["code"] == "DEPENDENCY_CONFLICT"
    assert body["details"]["counts"] == {"product_types": 1, "global_products": 1, "machine_templates": 0}

    listed = client.get(
        "/admin/machine-categories", params={"include_dependencies": True}, headers=admin_headers
    ).json()
    assert listed[0]["dependencies"]["product_types_count"] == 1


def test_delete_category_without_dependencies(client, admin_headers):
    category = client.post("/admin/machine-categories", json={"name": "Combo"}, headers=admin_headers).json()

    r = client.delete(f"/admin/machine-categories/{category['id']}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {"deleted": True, "count": 1}

    assert client.get(f"/admin/machine-categories/{category['id']}", headers=admin_headers).status_code == 404


def test_global_product_gets_placeholder_image(client, admin_headers):
    _, _, product = _seed_snack(client, admin_headers)
    assert product["image"] == "https://via.placeholder.com/150x150?text=Product"

    listed = client.get("/admin/global-products", headers=admin_headers).json()
    assert listed[0]["machine_categories"]["name"] == "Snack"
    assert listed[0]["product_types"]["name"] == "Chips"


def test_import_flow(client, admin_headers, operator_headers):
    _, _, product = _seed_snack(client, admin_headers)

    browse = client.get("/catalog/import-products", params={"search": "potato"}, headers=operator_headers)
    assert browse.status_code == 200
    [group] = browse.json()
    assert group["category_name"] == "Snack"
    assert [p["id"] for p in group["products"]] == [product["id"]]

    r = client.post("/catalog/import-products", json={"product_id": product["id"]}, headers=operator_headers)
    assert r.status_code == 201
    imported = r.json()
    assert imported["company_id"] == "company-a"
    assert imported["base_price"] is None
    assert imported["active_for_customer_building"] is False

    again = client.post("/catalog/import-products", json={"product_id": product["id"]}, headers=operator_headers)
    assert again.status_code == 409
    assert again.json()["detail"] == "This product is already in your company catalog."

    r = client.patch(
        f"/company/products/{imported['id']}",
        json={"active_for_customer_building": True},
        headers=operator_headers,
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "Set base price before activating."

    r = client.patch(f"/company/products/{imported['id']}", json={"base_price": 1.5}, headers=operator_headers)
    assert r.status_code == 200
    r = client.post(f"/company/products/{imported['id']}/toggle-active", headers=operator_headers)
    assert r.status_code == 200
    assert r.json()["active_for_customer_building"] is True

    listed = client.get("/company/products", headers=operator_headers).json()
    assert [p["global_products"]["product_name"] for p in listed] == ["Classic Potato Chips"]

    r = client.delete(f"/admin/global-products/{product['id']}", headers=admin_headers)
    assert r.status_code == 409


def test_commission_rate_out_of_range_is_rejected(client, admin_headers, operator_headers):
    _, _, product = _seed_snack(client, admin_headers)
    imported = client.post(
        "/catalog/import-products", json={"product_id": product["id"]}, headers=operator_headers
    ).json()

    r = client.patch(
        f"/company/products/{imported['id']}",
        json={"commission_enabled": True, "commission_rate": 150},
        headers=operator_headers,
    )
    assert r.status_code == 422


def test_operator_cannot_read_other_company(client, operator_headers):
    r = client.get("/company/products", params={"company_id": "company-b"}, headers=operator_headers)
    assert r.status_code == 403


def test_admin_may_view_any_company(client, admin_headers):
    r = client.get("/company/products", params={"company_id": "company-b"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == []


def test_user_without_role_cannot_browse(client, admin_headers):
    _seed_snack(client, admin_headers)
    headers = auth_headers(make_token("nobody", company_id="company-a"))
    assert client.get("/catalog/import-products", headers=headers).status_code == 403
