# catalog/services/query_builder.py
"""
Translate flat product filter parameters into SQL conditions and ordering.

Rules:
  - every query is restricted to active products
  - an omitted (None) parameter adds no condition
  - `search` splits into whitespace-separated terms; a product matches when
    any term appears (case-insensitively) in its name, brand or description
  - `brand` is a case-insensitive substring match
  - `min_price` / `max_price` are independent inclusive bounds
  - `in_stock` / `is_featured` are exact boolean matches

Ordering:
  - explicit sort: one of name, price, createdAt, "-" prefix for descending
  - no sort + search: relevance (name hit 3, brand hit 2, description hit 1,
    summed over terms) then newest first
  - otherwise newest first
  An id tie-breaker keeps page boundaries stable.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import ColumnElement, case, false, or_
from sqlmodel import col

from catalog.core.money import to_cents
from catalog.models.product import Product, ProductStatus

DEFAULT_SORT = "-createdAt"
MAX_SEARCH_TERMS = 10

SORT_FIELDS = {
    "name": col(Product.name),
    "price": col(Product.price_cents),
    "createdAt": col(Product.created_at),
}

SEARCH_WEIGHTS = (
    (col(Product.name), 3),
    (col(Product.brand), 2),
    (col(Product.description), 1),
)


@dataclass(frozen=True)
class ProductFilters:
    search: str | None = None
    category: str | None = None
    brand: str | None = None
    in_stock: bool | None = None
    min_price: Decimal | float | None = None
    max_price: Decimal | float | None = None
    is_featured: bool | None = None


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if not 1 <= self.limit <= 100:
            raise ValueError("limit must be between 1 and 100")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_ci(column, term: str) -> ColumnElement[bool]:
    return column.ilike(f"%{_escape_like(term)}%", escape="\\")


def search_terms(search: str | None) -> list[str]:
    if not search:
        return []
    seen: list[str] = []
    for term in search.split():
        term = term.lower()
        if term not in seen:
            seen.append(term)
    return seen[:MAX_SEARCH_TERMS]


def search_condition(terms: list[str]) -> ColumnElement[bool]:
    if not terms:
        return false()
    return or_(*(contains_ci(column, term) for term in terms for column, _ in SEARCH_WEIGHTS))


def relevance_score(terms: list[str]) -> ColumnElement[int]:
    """Weighted count of (term, field) hits."""
    score = None
    for term in terms:
        for column, weight in SEARCH_WEIGHTS:
            hit = case((contains_ci(column, term), weight), else_=0)
            score = hit if score is None else score + hit
    return score


def build_conditions(filters: ProductFilters) -> list[ColumnElement[bool]]:
    """
    Build the WHERE clauses for a product listing.

    The active-status clause is always present.
    """
    conditions: list[ColumnElement[bool]] = [
        col(Product.status) == ProductStatus.ACTIVE.value,
    ]

    terms = search_terms(filters.search)
    if terms:
        conditions.append(search_condition(terms))

    if filters.category is not None:
        conditions.append(col(Product.category) == filters.category)

    if filters.brand:
        conditions.append(contains_ci(col(Product.brand), filters.brand.strip()))

    if filters.in_stock is not None:
        conditions.append(col(Product.in_stock) == filters.in_stock)

    if filters.is_featured is not None:
        conditions.append(col(Product.is_featured) == filters.is_featured)

    if filters.min_price is not None:
        conditions.append(col(Product.price_cents) >= to_cents(filters.min_price))

    if filters.max_price is not None:
        conditions.append(col(Product.price_cents) <= to_cents(filters.max_price))

    return conditions


def parse_sort(sort: str | None) -> tuple[str, bool]:
    """
    Split a sort key into (field, descending).

    Raises ValueError for fields outside the whitelist.
    """
    key = sort or DEFAULT_SORT
    descending = key.startswith("-")
    field = key[1:] if descending else key
    if field not in SORT_FIELDS:
        raise ValueError(f"Unsupported sort field: {field}")
    return field, descending


def build_order(sort: str | None, search: str | None = None) -> list[ColumnElement]:
    terms = search_terms(search)
    if sort is None and terms:
        return [
            relevance_score(terms).desc(),
            col(Product.created_at).desc(),
            col(Product.id),
        ]

    field, descending = parse_sort(sort)
    column = SORT_FIELDS[field]
    return [column.desc() if descending else column.asc(), col(Product.id)]
