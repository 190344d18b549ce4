# catalog/repositories/product_repo.py
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import ColumnElement, case, func, not_, update
from sqlmodel import Session, col, select

from catalog.models.product import Product, ProductStatus


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    - Counters and stock use single UPDATE statements so concurrent
      requests never lose increments.
    """

    # ----- Reads -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_active(self, session: Session, product_id: uuid.UUID) -> Product | None:
        stmt = select(Product).where(
            col(Product.id) == product_id,
            col(Product.status) == ProductStatus.ACTIVE.value,
        )
        return session.exec(stmt).first()

    def find(
        self,
        session: Session,
        conditions: Sequence[ColumnElement[bool]],
        order_by: Sequence[ColumnElement],
        skip: int = 0,
        limit: int = 10,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(*conditions)
            .order_by(*order_by)
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count(
        self,
        session: Session,
        conditions: Sequence[ColumnElement[bool]],
    ) -> int:
        stmt = select(func.count()).select_from(Product).where(*conditions)
        return int(session.exec(stmt).one() or 0)

    def matching_brands(
        self,
        session: Session,
        conditions: Sequence[ColumnElement[bool]],
        limit: int = 5,
    ) -> list[str]:
        stmt = (
            select(Product.brand)
            .where(*conditions)
            .distinct()
            .order_by(Product.brand)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def matching_categories(
        self,
        session: Session,
        conditions: Sequence[ColumnElement[bool]],
    ) -> list[str]:
        stmt = (
            select(Product.category)
            .where(*conditions)
            .distinct()
            .order_by(Product.category)
        )
        return list(session.exec(stmt).all())

    # ----- Writes -----

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = _now()
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()

    def set_status(
        self,
        session: Session,
        product: Product,
        status: ProductStatus,
    ) -> Product:
        product.status = status.value
        return self.update(session, product)

    # ----- Atomic updates -----

    def _execute_update(self, session: Session, stmt) -> bool:
        # Committing expires loaded instances, so callers re-read fresh values.
        stmt = stmt.execution_options(synchronize_session=False)
        result = session.exec(stmt)  # type: ignore[call-overload]
        session.commit()
        return bool(result.rowcount)

    def increment_view_count(self, session: Session, product_id: uuid.UUID) -> bool:
        stmt = (
            update(Product)
            .where(col(Product.id) == product_id)
            .values(view_count=col(Product.view_count) + 1)
        )
        return self._execute_update(session, stmt)

    def adjust_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        delta: int,
    ) -> bool:
        """
        Add `delta` to stock_quantity, flooring at zero, and recompute
        in_stock in the same statement.
        """
        new_quantity = col(Product.stock_quantity) + delta
        stmt = (
            update(Product)
            .where(col(Product.id) == product_id)
            .values(
                stock_quantity=case((new_quantity < 0, 0), else_=new_quantity),
                in_stock=new_quantity > 0,
                updated_at=_now(),
            )
        )
        return self._execute_update(session, stmt)

    def toggle_featured(self, session: Session, product_id: uuid.UUID) -> bool:
        stmt = (
            update(Product)
            .where(col(Product.id) == product_id)
            .values(is_featured=not_(col(Product.is_featured)), updated_at=_now())
        )
        return self._execute_update(session, stmt)
