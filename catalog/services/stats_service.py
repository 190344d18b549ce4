# catalog/services/stats_service.py
from sqlmodel import Session

from catalog.core.money import to_dollars
from catalog.repositories.stats_repo import StatsRepository
from catalog.schemas.stats import CatalogStats, CategoryStats


def _cents_avg_to_dollars(value) -> float:
    return round(float(value or 0.0) / 100, 2)


class StatsService:
    """
    Orchestrates aggregated catalog statistics.
    """

    def __init__(self, repo: StatsRepository):
        self.repo = repo

    def get_catalog_stats(self, session: Session) -> CatalogStats:
        (
            total,
            in_stock,
            featured,
            low_stock,
            stock_units,
            avg_price_cents,
            inventory_value_cents,
        ) = self.repo.totals(session)

        categories: list[CategoryStats] = []
        for (
            category,
            count,
            in_stock_count,
            total_stock,
            cat_avg_cents,
            min_cents,
            max_cents,
        ) in self.repo.by_category(session):
            categories.append(
                CategoryStats(
                    category=category,
                    count=int(count or 0),
                    in_stock_count=int(in_stock_count or 0),
                    total_stock=int(total_stock or 0),
                    average_price=_cents_avg_to_dollars(cat_avg_cents),
                    min_price=to_dollars(int(min_cents or 0)),
                    max_price=to_dollars(int(max_cents or 0)),
                )
            )

        total = int(total or 0)
        in_stock = int(in_stock or 0)
        return CatalogStats(
            total_products=total,
            in_stock_products=in_stock,
            out_of_stock_products=total - in_stock,
            featured_products=int(featured or 0),
            low_stock_products=int(low_stock or 0),
            inactive_products=self.repo.count_inactive(session),
            total_stock_units=int(stock_units or 0),
            average_price=_cents_avg_to_dollars(avg_price_cents),
            inventory_value=to_dollars(int(inventory_value_cents or 0)),
            categories=categories,
        )
