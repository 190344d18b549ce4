"""Tests for filter/sort translation, run against the in-memory database."""

import pytest

from catalog.repositories.product_repo import ProductRepository
from catalog.services.query_builder import (
    PageRequest,
    ProductFilters,
    build_conditions,
    build_order,
    parse_sort,
    search_terms,
)

repo = ProductRepository()


def _names(session, filters=ProductFilters(), sort=None, search=None, skip=0, limit=100):
    products = repo.find(
        session,
        build_conditions(filters),
        build_order(sort, search),
        skip=skip,
        limit=limit,
    )
    return [p.name for p in products]


def test_search_terms_are_lowercased_and_deduplicated():
    assert search_terms("  Pilot pilot SPORT ") == ["pilot", "sport"]
    assert search_terms("") == []
    assert search_terms(None) == []


def test_parse_sort():
    assert parse_sort(None) == ("createdAt", True)
    assert parse_sort("price") == ("price", False)
    assert parse_sort("-name") == ("name", True)
    with pytest.raises(ValueError):
        parse_sort("stockQuantity")


def test_page_request_offset_and_bounds():
    assert PageRequest(page=3, limit=20).offset == 40
    with pytest.raises(ValueError):
        PageRequest(page=0)
    with pytest.raises(ValueError):
        PageRequest(limit=101)


def test_only_active_products_are_listed(session, make_product):
    make_product(name="Visible")
    make_product(name="Hidden", status="inactive")

    assert _names(session) == ["Visible"]


def test_default_order_is_newest_first(session, make_product):
    make_product(name="Oldest")
    make_product(name="Middle")
    make_product(name="Newest")

    assert _names(session) == ["Newest", "Middle", "Oldest"]


def test_price_bounds_are_inclusive(session, make_product):
    make_product(name="Cheap", price_cents=5000)
    make_product(name="Mid", price_cents=15000)
    make_product(name="Pricey", price_cents=40000)

    names = _names(session, ProductFilters(min_price=50, max_price=150), sort="price")
    assert names == ["Cheap", "Mid"]


def test_brand_filter_is_case_insensitive_substring(session, make_product):
    make_product(name="A", brand="Michelin")
    make_product(name="B", brand="Goodyear")

    assert _names(session, ProductFilters(brand="miche")) == ["A"]


def test_brand_filter_treats_wildcards_literally(session, make_product):
    make_product(name="A", brand="Michelin")

    assert _names(session, ProductFilters(brand="%")) == []


def test_boolean_and_category_filters(session, make_product):
    make_product(name="Featured Tire", is_featured=True)
    make_product(name="Plain Tire")
    make_product(name="Out Tire", in_stock=False, stock_quantity=0)
    make_product(name="Rim", category="rims")

    assert _names(session, ProductFilters(is_featured=True)) == ["Featured Tire"]
    assert _names(session, ProductFilters(in_stock=False)) == ["Out Tire"]
    assert _names(session, ProductFilters(category="rims")) == ["Rim"]


def test_search_matches_any_term_in_any_field(session, make_product):
    make_product(name="Pilot Sport", brand="Michelin")
    make_product(name="Blizzak", brand="Bridgestone", description="Grips on winter ice and snow.")
    make_product(name="Eagle F1", brand="Goodyear")

    names = _names(session, ProductFilters(search="winter michelin"), sort="name")
    assert names == ["Blizzak", "Pilot Sport"]


def test_search_orders_by_relevance_without_sort(session, make_product):
    make_product(name="Plain", description="Mentions summer once in the text.")
    make_product(name="Summer Tire", brand="Summer")

    names = _names(session, ProductFilters(search="summer"), search="summer")
    assert names == ["Summer Tire", "Plain"]


def test_explicit_sort_overrides_relevance(session, make_product):
    make_product(name="Zeta", description="summer summer summer tire")
    make_product(name="Alpha summer")

    names = _names(session, ProductFilters(search="summer"), sort="-name", search="summer")
    assert names == ["Zeta", "Alpha summer"]


def test_pagination_is_stable(session, make_product):
    for i in range(5):
        make_product(name=f"Tire {i}", price_cents=10000)

    first = _names(session, sort="price", skip=0, limit=3)
    second = _names(session, sort="price", skip=3, limit=3)

    assert len(first) == 3
    assert len(second) == 2
    assert not set(first) & set(second)
