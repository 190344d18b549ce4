# catalog/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from catalog.core.money import to_dollars
from catalog.models.product import Category, Product

Season = Literal["all-season", "summer", "winter"]
SortKey = Literal["name", "-name", "price", "-price", "createdAt", "-createdAt"]
Tag = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]

MAX_TAGS = 10


class Specifications(BaseModel):
    """
    Technical specifications.

    Recognized keys are typed; any other key is kept as an opaque string.
    """

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    diameter: str | None = None
    width: str | None = None
    sidewall_height: str | None = Field(default=None, alias="sidewallHeight")
    load_index: str | None = Field(default=None, alias="loadIndex")
    speed_rating: str | None = Field(default=None, alias="speedRating")
    season: Season | None = None
    tread_pattern: str | None = Field(default=None, alias="treadPattern")

    @model_validator(mode="after")
    def stringify_extra(self) -> "Specifications":
        extra = self.__pydantic_extra__ or {}
        for key, value in list(extra.items()):
            if value is None:
                del extra[key]
            elif not isinstance(value, str):
                extra[key] = str(value)
        return self

    def as_dict(self) -> dict[str, str]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _validate_image_url(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not v.startswith(("http://", "https://")):
        raise ValueError("Image URL must be a valid URL")
    return v


class ProductCreate(BaseModel):
    """
    Payload for creating a product.

    - unknown fields are silently stripped
    - price fields are decimal dollars, stored as cents
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(min_length=1, max_length=200)
    brand: str = Field(min_length=1, max_length=100)
    price: Decimal = Field(ge=0)
    size: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=10, max_length=2000)
    category: Category = Category.TIRES
    image_url: str | None = Field(default=None, alias="imageUrl")
    in_stock: bool = Field(default=True, alias="inStock")
    stock_quantity: int = Field(default=0, ge=0, alias="stockQuantity")
    low_stock_threshold: int = Field(default=5, ge=0, alias="lowStockThreshold")
    original_price: Decimal | None = Field(default=None, ge=0, alias="originalPrice")
    sale_price: Decimal | None = Field(default=None, ge=0, alias="salePrice")
    is_featured: bool = Field(default=False, alias="isFeatured")
    specifications: Specifications | None = None
    tags: list[Tag] = Field(default_factory=list, max_length=MAX_TAGS)
    weight: float | None = Field(default=None, gt=0)
    manufacturer: str | None = Field(default=None, max_length=100)

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: str | None) -> str | None:
        return _validate_image_url(v)


class ProductUpdate(BaseModel):
    """
    Partial update payload for products.
    All fields are optional; only the ones sent are applied.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str | None = Field(default=None, min_length=1, max_length=200)
    brand: str | None = Field(default=None, min_length=1, max_length=100)
    price: Decimal | None = Field(default=None, ge=0)
    size: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, min_length=10, max_length=2000)
    category: Category | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")
    in_stock: bool | None = Field(default=None, alias="inStock")
    stock_quantity: int | None = Field(default=None, ge=0, alias="stockQuantity")
    low_stock_threshold: int | None = Field(default=None, ge=0, alias="lowStockThreshold")
    original_price: Decimal | None = Field(default=None, ge=0, alias="originalPrice")
    sale_price: Decimal | None = Field(default=None, ge=0, alias="salePrice")
    is_featured: bool | None = Field(default=None, alias="isFeatured")
    is_active: bool | None = Field(default=None, alias="isActive")
    specifications: Specifications | None = None
    tags: list[Tag] | None = Field(default=None, max_length=MAX_TAGS)
    weight: float | None = Field(default=None, gt=0)
    manufacturer: str | None = Field(default=None, max_length=100)

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: str | None) -> str | None:
        return _validate_image_url(v)

    @field_validator(
        "name",
        "brand",
        "price",
        "size",
        "description",
        "category",
        "in_stock",
        "stock_quantity",
        "low_stock_threshold",
        "is_featured",
        "is_active",
        "tags",
    )
    @classmethod
    def not_null(cls, v: Any) -> Any:
        # Fields backed by non-nullable columns may be omitted but not cleared.
        if v is None:
            raise ValueError("field cannot be null")
        return v


class ProductQuery(BaseModel):
    """
    Query-string parameters for the product list.

    Omitted filters impose no constraint.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    sort: SortKey | None = None
    search: str | None = Field(default=None, max_length=100)
    category: Category | None = None
    brand: str | None = Field(default=None, max_length=100)
    in_stock: bool | None = Field(default=None, alias="inStock")
    min_price: Decimal | None = Field(default=None, ge=0, alias="minPrice")
    max_price: Decimal | None = Field(default=None, ge=0, alias="maxPrice")
    is_featured: bool | None = Field(default=None, alias="isFeatured")

    @field_validator("search", "brand")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class StockAdjustment(BaseModel):
    """Signed delta applied to stockQuantity (negative to remove units)."""

    quantity: int


class BulkCreateRequest(BaseModel):
    """
    Up to 100 raw product payloads.

    Items are validated one by one so a bad item does not reject the batch.
    """

    products: list[Any] = Field(min_length=1, max_length=100)


class ProductRead(BaseModel):
    """
    Product representation for clients (decimal dollars, camelCase).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    name: str
    brand: str
    price: float
    size: str
    description: str
    category: str
    image_url: str | None = Field(default=None, alias="imageUrl")
    stock_quantity: int = Field(alias="stockQuantity")
    low_stock_threshold: int = Field(alias="lowStockThreshold")
    in_stock: bool = Field(alias="inStock")
    is_low_stock: bool = Field(alias="isLowStock")
    original_price: float | None = Field(default=None, alias="originalPrice")
    sale_price: float | None = Field(default=None, alias="salePrice")
    discount_percentage: int = Field(alias="discountPercentage")
    is_featured: bool = Field(alias="isFeatured")
    is_active: bool = Field(alias="isActive")
    status: str
    view_count: int = Field(alias="viewCount")
    purchase_count: int = Field(alias="purchaseCount")
    specifications: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    weight: float | None = None
    manufacturer: str | None = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    @classmethod
    def from_model(cls, product: Product, status: str | None = None) -> "ProductRead":
        return cls(
            id=product.id,
            name=product.name,
            brand=product.brand,
            price=to_dollars(product.price_cents),
            size=product.size,
            description=product.description,
            category=product.category,
            image_url=product.image_url,
            stock_quantity=product.stock_quantity,
            low_stock_threshold=product.low_stock_threshold,
            in_stock=product.in_stock,
            is_low_stock=product.is_low_stock,
            original_price=to_dollars(product.original_price_cents),
            sale_price=to_dollars(product.sale_price_cents),
            discount_percentage=product.discount_percentage,
            is_featured=product.is_featured,
            is_active=product.is_active if status is None else False,
            status=status or product.status,
            view_count=product.view_count,
            purchase_count=product.purchase_count,
            specifications=dict(product.specifications or {}),
            tags=list(product.tags or []),
            weight=product.weight,
            manufacturer=product.manufacturer,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class StockSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    name: str
    stock_quantity: int = Field(alias="stockQuantity")
    in_stock: bool = Field(alias="inStock")
    is_low_stock: bool = Field(alias="isLowStock")
    low_stock_threshold: int = Field(alias="lowStockThreshold")


class SearchSuggestions(BaseModel):
    brands: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
