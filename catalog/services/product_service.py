# catalog/services/product_service.py
import logging
import uuid
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col

from catalog.core.errors import BadRequest, NotFound, validation_errors
from catalog.core.money import to_cents
from catalog.database import Database
from catalog.models.product import (
    Category,
    Product,
    ProductStatus,
    compute_discount_percentage,
)
from catalog.repositories.product_repo import ProductRepository
from catalog.schemas.common import (
    BulkCreateResult,
    BulkItemError,
    FieldError,
    Pagination,
)
from catalog.schemas.product import (
    ProductCreate,
    ProductQuery,
    ProductRead,
    ProductUpdate,
    SearchSuggestions,
)
from catalog.services.query_builder import (
    PageRequest,
    ProductFilters,
    build_conditions,
    build_order,
    contains_ci,
    search_condition,
    search_terms,
)

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
MAX_SEARCH_RESULTS = 50
MAX_SUGGESTIONS = 5

# payload field -> column holding integer cents
_MONEY_FIELDS = {
    "price": "price_cents",
    "original_price": "original_price_cents",
    "sale_price": "sale_price_cents",
}


def parse_product_id(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except (ValueError, AttributeError, TypeError):
        raise BadRequest("Invalid product ID format")


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - turn list/search parameters into repository queries
      - map validated payloads onto Product rows (dollars -> cents,
        derived discount, stock flag)
      - lifecycle transitions (active -> inactive -> purged)
      - map missing records to NotFound
    Admin-only operations are enforced at the router via require_admin.
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _apply_fields(product: Product, data: dict[str, Any]) -> None:
        """Copy snake_case payload fields onto the row, converting money."""
        for field, value in data.items():
            if field in _MONEY_FIELDS:
                setattr(product, _MONEY_FIELDS[field], None if value is None else to_cents(value))
            elif field == "category":
                product.category = Category(value).value
            elif field == "is_active":
                product.status = (
                    ProductStatus.ACTIVE.value if value else ProductStatus.INACTIVE.value
                )
            elif field == "specifications":
                product.specifications = value or {}
            elif field == "tags":
                product.tags = list(value or [])
            else:
                setattr(product, field, value)

        product.discount_percentage = compute_discount_percentage(
            product.original_price_cents,
            product.sale_price_cents,
        )

    @staticmethod
    def _payload_dict(payload: ProductCreate | ProductUpdate, **kwargs: Any) -> dict[str, Any]:
        data = payload.model_dump(**kwargs)
        if payload.specifications is not None:
            data["specifications"] = payload.specifications.as_dict()
        return data

    # ----- Queries -----

    def list_products(
        self,
        session: Session,
        query: ProductQuery,
    ) -> tuple[list[Product], Pagination]:
        filters = ProductFilters(
            search=query.search,
            category=query.category.value if query.category else None,
            brand=query.brand,
            in_stock=query.in_stock,
            min_price=query.min_price,
            max_price=query.max_price,
            is_featured=query.is_featured,
        )
        page = PageRequest(page=query.page, limit=query.limit)
        conditions = build_conditions(filters)

        total = self.repo.count(session, conditions)
        products = self.repo.find(
            session,
            conditions,
            build_order(query.sort, query.search),
            skip=page.offset,
            limit=page.limit,
        )
        return products, Pagination.build(page.page, page.limit, total)

    def list_by_category(
        self,
        session: Session,
        category: Category,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Product], Pagination]:
        """In-stock active products of one category, newest first."""
        return self.list_products(
            session,
            ProductQuery(page=page, limit=limit, category=category, in_stock=True),
        )

    def search(
        self,
        session: Session,
        q: str,
        limit: int = 10,
    ) -> tuple[list[Product], SearchSuggestions]:
        """
        Relevance-ordered text search plus brand/category suggestions.
        """
        q = (q or "").strip()
        if len(q) < MIN_SEARCH_LENGTH:
            raise BadRequest(
                f"Search query must be at least {MIN_SEARCH_LENGTH} characters long"
            )
        limit = max(1, min(limit, MAX_SEARCH_RESULTS))

        conditions = build_conditions(ProductFilters(search=q))
        products = self.repo.find(session, conditions, build_order(None, q), limit=limit)

        active = build_conditions(ProductFilters())
        text_conditions = active + [search_condition(search_terms(q))]
        suggestions = SearchSuggestions(
            brands=self.repo.matching_brands(
                session,
                active + [contains_ci(col(Product.brand), q)],
                limit=MAX_SUGGESTIONS,
            ),
            categories=self.repo.matching_categories(session, text_conditions),
        )
        return products, suggestions

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        """Active product for public reads."""
        product = self.repo.get_active(session, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def _get_for_admin(self, session: Session, product_id: uuid.UUID) -> Product:
        """Any stored product, active or not."""
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFound("Product not found")
        return product

    def record_view(self, db: Database, product_id: uuid.UUID) -> None:
        """
        Increment the view counter in a fresh session.

        Runs after the response is sent; a failure is logged and dropped
        so it can never fail the read that triggered it.
        """
        try:
            with db.session() as session:
                self.repo.increment_view_count(session, product_id)
        except SQLAlchemyError:
            logger.warning("Failed to record view for product %s", product_id, exc_info=True)

    # ----- Mutations -----

    def create_product(self, session: Session, payload: ProductCreate) -> Product:
        product = Product(
            name=payload.name,
            brand=payload.brand,
            price_cents=to_cents(payload.price),
            size=payload.size,
            description=payload.description,
        )
        data = self._payload_dict(payload, exclude={"name", "brand", "price", "size", "description"})
        self._apply_fields(product, data)
        product = self.repo.create(session, product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update: only fields present in the payload are applied.

        Setting stockQuantity without inStock keeps the flag consistent
        with the new quantity.
        """
        product = self._get_for_admin(session, product_id)
        data = self._payload_dict(payload, exclude_unset=True)

        if "stock_quantity" in data and "in_stock" not in data:
            data["in_stock"] = data["stock_quantity"] > 0

        self._apply_fields(product, data)
        return self.repo.update(session, product)

    def adjust_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        delta: int,
    ) -> Product:
        """
        Apply a signed stock delta; the quantity never goes below zero
        and inStock becomes false exactly when the quantity is zero.
        """
        if not self.repo.adjust_stock(session, product_id, delta):
            raise NotFound("Product not found")
        product = self._get_for_admin(session, product_id)
        logger.info(
            "Stock adjusted for %s by %+d -> %d",
            product_id,
            delta,
            product.stock_quantity,
        )
        return product

    def toggle_featured(self, session: Session, product_id: uuid.UUID) -> Product:
        if not self.repo.toggle_featured(session, product_id):
            raise NotFound("Product not found")
        return self._get_for_admin(session, product_id)

    def soft_delete(self, session: Session, product_id: uuid.UUID) -> Product:
        """Active -> inactive. The row is retained."""
        product = self._get_for_admin(session, product_id)
        return self.repo.set_status(session, product, ProductStatus.INACTIVE)

    def hard_delete(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        """
        Permanently remove a product.

        Returns the last known state, reported as purged.
        """
        product = self._get_for_admin(session, product_id)
        snapshot = ProductRead.from_model(product, status=ProductStatus.PURGED.value)
        self.repo.delete(session, product)
        logger.info("Permanently deleted product %s", product_id)
        return snapshot

    def bulk_create(
        self,
        session: Session,
        items: list[Any],
    ) -> BulkCreateResult:
        """
        Create many products, each validated and committed on its own.

        A failing item (including one that is not an object) is reported
        and skipped; items already created stay.
        """
        created: list[ProductRead] = []
        errors: list[BulkItemError] = []

        for index, item in enumerate(items):
            if not isinstance(item, dict):
                errors.append(
                    BulkItemError(
                        index=index,
                        errors=[FieldError(field="body", message="Product must be a JSON object")],
                    )
                )
                continue

            try:
                payload = ProductCreate.model_validate(item)
            except ValidationError as exc:
                errors.append(
                    BulkItemError(
                        index=index,
                        errors=[FieldError(**e) for e in validation_errors(exc.errors())],
                    )
                )
                continue

            try:
                product = self.create_product(session, payload)
            except SQLAlchemyError:
                session.rollback()
                logger.warning("Bulk create: item %d could not be saved", index, exc_info=True)
                errors.append(
                    BulkItemError(
                        index=index,
                        errors=[FieldError(field="body", message="Could not save product")],
                    )
                )
                continue

            created.append(ProductRead.from_model(product))

        return BulkCreateResult(
            created=len(created),
            failed=len(errors),
            products=created,
            errors=errors,
        )
