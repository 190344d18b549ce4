# catalog/schemas/stats.py
from pydantic import BaseModel, ConfigDict, Field


class CategoryStats(BaseModel):
    """
    Aggregates for one category (active products only).
    """

    model_config = ConfigDict(populate_by_name=True)

    category: str
    count: int
    in_stock_count: int = Field(alias="inStockCount")
    total_stock: int = Field(alias="totalStock")
    average_price: float = Field(alias="averagePrice")
    min_price: float = Field(alias="minPrice")
    max_price: float = Field(alias="maxPrice")


class CatalogStats(BaseModel):
    """
    Full payload for the stats endpoint.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_products: int = Field(alias="totalProducts")
    in_stock_products: int = Field(alias="inStockProducts")
    out_of_stock_products: int = Field(alias="outOfStockProducts")
    featured_products: int = Field(alias="featuredProducts")
    low_stock_products: int = Field(alias="lowStockProducts")
    inactive_products: int = Field(alias="inactiveProducts")
    total_stock_units: int = Field(alias="totalStockUnits")
    average_price: float = Field(alias="averagePrice")
    inventory_value: float = Field(alias="inventoryValue")
    categories: list[CategoryStats]


class StatsResponse(BaseModel):
    success: bool = True
    data: CatalogStats
