from storefront.app.common.errors import CatalogUnavailable
from storefront.app.extensions import db
from storefront.app.models import Product, Variant


def _grid_count(html: str) -> int:
    return html.count('class="product"')


def test_shop_all_lists_everything(client, seeded):
    r = client.get("/products")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert _grid_count(html) == 7
    assert "Oxford Shirt" in html
    # one page, no pagination controls
    assert 'class="pagination"' not in html


def test_home_redirects_to_shop(client):
    r = client.get("/")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/products")


def test_main_category_page_shows_its_products(client, seeded):
    r = client.get("/main-category/shoes")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert "<h1>Shoes</h1>" in html
    assert "Runner Sneakers" in html
    assert "Chelsea Boots" in html
    assert "Ceramic Vase" not in html
    assert _grid_count(html) == 2


def test_unknown_slug_renders_unfiltered(client, seeded):
    r = client.get("/main-category/garden")
    assert r.status_code == 200
    html = r.get_data(as_text=True)
    assert "<h1>All products</h1>" in html
    assert _grid_count(html) == 7


def test_bad_page_and_limit_fall_back(client, seeded):
    r = client.get("/main-category/shoes?page=abc&limit=-5")
    assert r.status_code == 200
    assert _grid_count(r.get_data(as_text=True)) == 2


def test_filtering_a_category_page_moves_to_shop_all(client, seeded):
    r = client.get("/main-category/shoes?size=42")
    assert r.status_code == 302
    location = r.headers["Location"]
    assert "/products?" in location
    assert "size=42" in location
    assert "cat=" in location

    followed = client.get(location)
    html = followed.get_data(as_text=True)
    assert _grid_count(html) == 2


def test_fetch_failure_shows_static_error(client, monkeypatch):
    def boom():
        raise CatalogUnavailable("down")

    monkeypatch.setattr("storefront.modules.catalog.view.load_businesses", boom)
    r = client.get("/main-category/shoes")
    assert r.status_code == 503
    assert "Error loading category. Please try again." in r.get_data(as_text=True)


def _add_products(count: int) -> None:
    for i in range(count):
        db.session.add(Product(name=f"Extra {i:02d}", variants=[Variant(selling_price=10 + i, stock=1)]))
    db.session.commit()


def test_pagination_pages_and_clamps(client, seeded):
    _add_products(25)

    first = client.get("/products").get_data(as_text=True)
    assert _grid_count(first) == 20
    assert 'class="pagination"' in first

    second = client.get("/products?page=2").get_data(as_text=True)
    assert _grid_count(second) == 12

    # past the end shows the last page
    beyond = client.get("/products?page=9").get_data(as_text=True)
    assert _grid_count(beyond) == 12


def test_control_links_reset_the_page(client, seeded):
    _add_products(25)
    html = client.get("/products?page=2").get_data(as_text=True)
    assert 'href="/products?sort=name"' in html
    assert 'href="/products?size=M"' in html
    assert 'href="/products"' in html


def test_size_with_comma_filters_through_its_link(client, seeded):
    db.session.add(Product(name="Half Size Boot", variants=[Variant(selling_price=60, stock=1, size_values=["42,5"])]))
    db.session.commit()

    html = client.get("/products").get_data(as_text=True)
    assert 'href="/products?size=42%2C5"' in html

    filtered = client.get("/products?size=42%2C5").get_data(as_text=True)
    assert _grid_count(filtered) == 1
    assert "Half Size Boot" in filtered
