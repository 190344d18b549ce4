# catalog/models/product.py
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Category(str, Enum):
    TIRES = "tires"
    RIMS = "rims"
    ACCESSORIES = "accessories"
    SERVICES = "services"


class ProductStatus(str, Enum):
    """
    Lifecycle state of a catalog record.

      - active:   visible on the storefront
      - inactive: soft-deleted; row kept, hidden from public reads
      - purged:   hard-deleted; never stored, only reported by the
                  permanent-delete response

    Only ACTIVE and INACTIVE are ever written to the `status` column.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    PURGED = "purged"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(SQLModel, table=True):
    """
    Product catalog entry (tires, rims, accessories, services).

    Money is stored as integer cents (`*_cents` columns); the API
    exposes decimal dollars.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    brand: str = Field(
        max_length=100,
        index=True,
        description="Brand, e.g. Michelin, Goodyear",
    )

    price_cents: int = Field(
        ge=0,
        index=True,
        description="Unit price in cents",
    )

    size: str = Field(
        max_length=50,
        description="Size, e.g. 225/45R17 for tires, 18x8 for rims",
    )

    description: str = Field(
        max_length=2000,
        description="Long product description",
    )

    category: str = Field(
        default=Category.TIRES.value,
        max_length=20,
        index=True,
        description="tires | rims | accessories | services",
    )

    image_url: str | None = Field(
        default=None,
        description="Main product image URL",
    )

    # ----- Inventory -----

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    low_stock_threshold: int = Field(
        default=5,
        ge=0,
        description="Quantity at or below which the product counts as low stock",
    )

    in_stock: bool = Field(
        default=True,
        index=True,
        description="Availability flag; recomputed on stock adjustment",
    )

    # ----- Pricing extras -----

    original_price_cents: int | None = Field(default=None, ge=0)
    sale_price_cents: int | None = Field(default=None, ge=0)
    discount_percentage: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Derived from original/sale price",
    )

    # ----- Flags & counters -----

    is_featured: bool = Field(default=False, index=True)

    status: str = Field(
        default=ProductStatus.ACTIVE.value,
        max_length=20,
        index=True,
        description="Lifecycle state: active | inactive",
    )

    view_count: int = Field(default=0, ge=0)
    purchase_count: int = Field(default=0, ge=0)

    # ----- Free-form attributes -----

    specifications: dict[str, str] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )

    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    weight: float | None = Field(default=None, description="Shipping weight (lb)")
    manufacturer: str | None = Field(default=None, max_length=100)

    created_at: datetime = Field(
        default_factory=_utcnow,
        index=True,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=_utcnow,
        description="Last modification timestamp (UTC)",
    )

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.low_stock_threshold


def compute_discount_percentage(
    original_price_cents: int | None,
    sale_price_cents: int | None,
) -> int:
    """
    Percentage off the original price, clamped to [0, 100].

    Returns 0 unless both prices are present and the original is positive.
    """
    if original_price_cents is None or sale_price_cents is None:
        return 0
    if original_price_cents <= 0:
        return 0
    pct = round((original_price_cents - sale_price_cents) * 100 / original_price_cents)
    return max(0, min(100, pct))
