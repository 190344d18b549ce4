# catalog/repositories/stats_repo.py
from sqlalchemy import case, func
from sqlmodel import Session, col, select

from catalog.models.product import Product, ProductStatus

_ACTIVE = col(Product.status) == ProductStatus.ACTIVE.value


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class StatsRepository:
    """
    Read-only aggregated queries over the catalog.
    """

    def totals(self, session: Session) -> tuple:
        """
        One row of catalog-wide aggregates over active products:
        (total, in_stock, featured, low_stock, stock_units,
         avg_price_cents, inventory_value_cents)
        """
        stmt = select(
            func.count(),
            _count_where(col(Product.in_stock) == True),  # noqa: E712
            _count_where(col(Product.is_featured) == True),  # noqa: E712
            _count_where(col(Product.stock_quantity) <= col(Product.low_stock_threshold)),
            func.coalesce(func.sum(Product.stock_quantity), 0),
            func.coalesce(func.avg(Product.price_cents), 0.0),
            func.coalesce(
                func.sum(col(Product.price_cents) * col(Product.stock_quantity)),
                0,
            ),
        ).where(_ACTIVE)
        return tuple(session.exec(stmt).one())

    def count_inactive(self, session: Session) -> int:
        stmt = (
            select(func.count())
            .select_from(Product)
            .where(col(Product.status) == ProductStatus.INACTIVE.value)
        )
        value = session.exec(stmt).one()
        return int(value or 0)

    def by_category(self, session: Session) -> list[tuple]:
        """
        Per-category aggregates over active products:
        (category, count, in_stock_count, total_stock,
         avg_price_cents, min_price_cents, max_price_cents)
        """
        stmt = (
            select(
                Product.category,
                func.count(col(Product.id)).label("count"),
                _count_where(col(Product.in_stock) == True),  # noqa: E712
                func.coalesce(func.sum(Product.stock_quantity), 0),
                func.coalesce(func.avg(Product.price_cents), 0.0),
                func.coalesce(func.min(Product.price_cents), 0),
                func.coalesce(func.max(Product.price_cents), 0),
            )
            .where(_ACTIVE)
            .group_by(Product.category)
            .order_by(func.count(col(Product.id)).desc(), Product.category)
        )
        return list(session.exec(stmt).all())
