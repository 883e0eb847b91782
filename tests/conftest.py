import os
import sys
from datetime import datetime, timezone

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storefront.app.cli import seed_catalog
from storefront.app.config import Config
from storefront.app.extensions import db
from storefront.app.factory import create_app
from storefront.modules.catalog.domain import CategoryTag, Product, Variant

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


class TestingConfig(Config):
    TESTING = True
    # Use SQLite in tests for simplicity.
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"


@pytest.fixture()
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def seeded(app):
    seed_catalog()
    return app


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def make_product():
    """Build a catalog Product with a single variant unless ``variants`` is given."""

    def _make(
        id="p1",
        name="Product",
        price=10.0,
        offer=None,
        offer_start=None,
        offer_end=None,
        stock=1,
        sizes=(),
        condition="new",
        tags=(),
        variants=None,
    ):
        if variants is None:
            variants = [
                Variant(
                    selling_price=price,
                    offer_price=offer,
                    offer_start=offer_start,
                    offer_end=offer_end,
                    stock=stock,
                    size_values=tuple(sizes),
                    condition=condition,
                )
            ]
        return Product(
            id=id,
            name=name,
            category_tags=tuple(CategoryTag(id=tag_id, name=tag_name) for tag_id, tag_name in tags),
            variants=tuple(variants),
        )

    return _make
