from __future__ import annotations

from datetime import datetime, timedelta

from flask import Blueprint

from storefront.app.extensions import db
from storefront.app.models import Business, Category, Product, Variant

cli_bp = Blueprint("cli", __name__, cli_group=None)

# (name, children) pairs; list order is display order
DEMO_CATEGORIES = [
    ("Clothing", [("Men", [("Shirts", [])]), ("Women", [("Dresses", [])])]),
    ("Shoes", [("Sneakers", []), ("Boots", [])]),
    ("Home & Living", []),
]

# name, category path, variants (selling, offer, offer window days, stock, sizes, condition)
DEMO_PRODUCTS = [
    ("Oxford Shirt", "Shirts", [(45.0, 35.0, (-3, 10), 12, ["S", "M", "L"], "new")]),
    ("Linen Shirt", "Shirts", [(55.0, None, None, 0, ["M"], "new"), (52.0, None, None, 4, ["L"], "new")]),
    ("Summer Dress", "Dresses", [(80.0, 60.0, (-30, -1), 5, ["S", "M"], "new")]),
    ("Denim Jacket", "Men", [(120.0, None, None, 2, ["M", "L", "XL"], "used")]),
    ("Runner Sneakers", "Sneakers", [(95.0, 79.0, (-1, 5), 20, ["41", "42", "43"], "new")]),
    ("Chelsea Boots", "Boots", [(150.0, None, None, 7, ["42", "44"], "refurbished")]),
    ("Ceramic Vase", "Home & Living", [(30.0, None, None, 15, [], "new")]),
]


def _add_categories(business: Business, nodes, parent: Category | None, by_name: dict) -> None:
    for position, (name, children) in enumerate(nodes):
        cat = Category(business=business, parent=parent, name=name, position=position)
        db.session.add(cat)
        by_name[name] = cat
        _add_categories(business, children, cat, by_name)


def _path_to_root(cat: Category) -> list[Category]:
    path = []
    while cat is not None:
        path.append(cat)
        cat = cat.parent
    return path


def seed_catalog(now: datetime | None = None) -> bool:
    """Seed a demo business, category tree and products.

    Safe to run multiple times; it will no-op if products exist.
    """
    if Product.query.count() > 0:
        return False

    now = now or datetime.utcnow()
    business = Business(name="Demo Store")
    db.session.add(business)

    by_name: dict[str, Category] = {}
    _add_categories(business, DEMO_CATEGORIES, None, by_name)

    for name, category_name, variants in DEMO_PRODUCTS:
        product = Product(name=name, description=f"{name} from the demo catalog.")
        # tag with the leaf category and every ancestor, as the catalog service does
        product.categories = _path_to_root(by_name[category_name])
        for position, (selling, offer, window, stock, sizes, condition) in enumerate(variants):
            product.variants.append(
                Variant(
                    position=position,
                    selling_price=selling,
                    offer_price=offer,
                    offer_start=now + timedelta(days=window[0]) if window else None,
                    offer_end=now + timedelta(days=window[1]) if window else None,
                    stock=stock,
                    size_values=sizes,
                    condition=condition,
                )
            )
        db.session.add(product)

    db.session.commit()
    return True


@cli_bp.cli.command("init-db")
def init_db() -> None:
    """Create tables."""
    db.create_all()
    print("DB initialized (tables created).")


@cli_bp.cli.command("seed")
def seed_data() -> None:
    """Seed minimal dev data."""
    db.create_all()
    if not seed_catalog():
        print("Products already exist. Reset the database to reseed.")
        return
    print(f"Seed complete: {Product.query.count()} products.")
