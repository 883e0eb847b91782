from storefront.app.common.errors import CatalogUnavailable


def test_business_returns_category_tree(client, seeded):
    r = client.get("/api/business")
    assert r.status_code == 200
    assert r.json["name"] == "Demo Store"
    top = r.json["categories"]
    assert [c["name"] for c in top] == ["Clothing", "Shoes", "Home & Living"]
    assert [c["name"] for c in top[0]["children"]] == ["Men", "Women"]


def test_business_missing(client):
    r = client.get("/api/business")
    assert r.status_code == 404
    assert r.json["error"]["code"] == "not_found"


def test_products_listing_is_paged(client, seeded):
    r = client.get("/api/products?page=1&limit=3")
    assert r.status_code == 200
    assert len(r.json["items"]) == 3
    assert r.json["pagination"] == {"page": 1, "limit": 3, "count": 3, "total": 7}

    r = client.get("/api/products?page=3&limit=3")
    assert len(r.json["items"]) == 1


def test_products_listing_bad_numbers_use_defaults(client, seeded):
    r = client.get("/api/products?page=zero&limit=-4")
    assert r.status_code == 200
    assert r.json["pagination"]["page"] == 1
    assert r.json["pagination"]["limit"] == 20
    assert len(r.json["items"]) == 7


def test_product_records_carry_categories_and_variants(client, seeded):
    items = client.get("/api/products").json["items"]
    shirt = next(i for i in items if i["name"] == "Oxford Shirt")
    assert {c["name"] for c in shirt["categories"]} == {"Shirts", "Men", "Clothing"}
    assert shirt["variants"][0]["size_values"] == ["S", "M", "L"]


def test_main_category_resolves_slug(client, seeded):
    r = client.get("/api/main-category/clothing")
    assert r.status_code == 200
    assert r.json["category"]["name"] == "Clothing"
    # Clothing, Men, Shirts, Women, Dresses
    assert len(r.json["descendant_ids"]) == 5

    r = client.get("/api/main-category/HOME-LIVING")
    assert r.json["category"]["name"] == "Home & Living"


def test_main_category_without_match(client, seeded):
    r = client.get("/api/main-category/garden")
    assert r.status_code == 200
    assert r.json["category"] is None
    assert r.json["descendant_ids"] == []


def test_view_sorts_by_effective_price(client, seeded):
    r = client.get("/api/products/view?sort=price-low")
    assert r.status_code == 200
    names = [i["name"] for i in r.json["items"]]
    # Oxford Shirt and Runner Sneakers are on offer, the dress offer has expired
    assert names == [
        "Ceramic Vase",
        "Oxford Shirt",
        "Linen Shirt",
        "Runner Sneakers",
        "Summer Dress",
        "Denim Jacket",
        "Chelsea Boots",
    ]
    assert r.json["price_bounds"] == [30.0, 150.0]
    assert r.json["total_pages"] == 1


def test_view_filters(client, seeded):
    assert client.get("/api/products/view?size=M").json["filtered_count"] == 4
    assert client.get("/api/products/view?q=refurb").json["filtered_count"] == 1
    assert client.get("/api/products/view?min_price=50&max_price=100").json["filtered_count"] == 3
    assert client.get("/api/products/view?size=42&q=boots").json["items"][0]["name"] == "Chelsea Boots"


def test_view_seeds_category_from_query(client, seeded):
    clothing = client.get("/api/main-category/clothing").json["category"]
    r = client.get(f"/api/products/view?category={clothing['id']}")
    names = {i["name"] for i in r.json["items"]}
    assert names == {"Oxford Shirt", "Linen Shirt", "Summer Dress", "Denim Jacket"}


def test_view_reports_unavailable_catalog(client, monkeypatch):
    def boom():
        raise CatalogUnavailable("down")

    monkeypatch.setattr("storefront.modules.catalog.view.load_products", boom)
    r = client.get("/api/products/view")
    assert r.status_code == 503
    assert r.json["error"]["code"] == "catalog_unavailable"
