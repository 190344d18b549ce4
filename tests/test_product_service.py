"""Service and repository tests that bypass HTTP."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from catalog.core.errors import BadRequest, NotFound
from catalog.repositories.product_repo import ProductRepository
from catalog.schemas.product import ProductCreate
from catalog.seed import SAMPLE_PRODUCTS, seed_products
from catalog.services.product_service import ProductService, parse_product_id

repo = ProductRepository()
service = ProductService(repo)


def test_parse_product_id():
    pid = uuid.uuid4()
    assert parse_product_id(str(pid)) == pid
    with pytest.raises(BadRequest):
        parse_product_id("123")


def test_record_view_increments_counter(app, session, make_product):
    product = make_product()

    service.record_view(app.state.db, product.id)
    service.record_view(app.state.db, product.id)

    session.refresh(product)
    assert product.view_count == 2


def test_record_view_swallows_database_errors(make_product, caplog):
    product = make_product()

    class BrokenDatabase:
        def session(self):
            raise OperationalError("SELECT 1", {}, Exception("db down"))

    service.record_view(BrokenDatabase(), product.id)

    assert "Failed to record view" in caplog.text


def test_adjust_stock_is_relative(session, make_product):
    product = make_product(stock_quantity=4)

    assert repo.adjust_stock(session, product.id, 3)
    session.refresh(product)
    assert product.stock_quantity == 7
    assert product.in_stock is True


def test_atomic_updates_report_missing_rows(session):
    missing = uuid.uuid4()
    assert repo.adjust_stock(session, missing, 1) is False
    assert repo.toggle_featured(session, missing) is False
    with pytest.raises(NotFound):
        service.adjust_stock(session, missing, 1)


def test_create_product_derives_discount(session):
    payload = ProductCreate.model_validate(
        {
            "name": "Continental DWS06",
            "brand": "Continental",
            "price": 199.99,
            "originalPrice": 229.99,
            "salePrice": 199.99,
            "size": "225/50R17",
            "description": "All-season ultra-high performance tire.",
        }
    )

    product = service.create_product(session, payload)

    assert product.price_cents == 19999
    assert product.original_price_cents == 22999
    assert product.discount_percentage == 13


def test_soft_then_hard_delete(session, make_product):
    product = make_product()

    service.soft_delete(session, product.id)
    with pytest.raises(NotFound):
        service.get_product(session, product.id)

    snapshot = service.hard_delete(session, product.id)
    assert snapshot.status == "purged"
    assert repo.get_by_id(session, product.id) is None


def test_seed_products(session, make_product):
    make_product(name="Leftover")

    created = seed_products(session)

    assert len(created) == len(SAMPLE_PRODUCTS)
    names = {p.name for p in repo.find(session, [], [], limit=100)}
    assert "Leftover" not in names
    assert "Michelin Pilot Sport 4S" in names
