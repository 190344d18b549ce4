# catalog/schemas/common.py
"""Response envelopes shared across the API.

Every response has the shape {success, message?, data?, errors?};
list endpoints add `pagination`, search adds `suggestions`.
"""

import math

from pydantic import BaseModel, ConfigDict, Field

from catalog.schemas.product import ProductRead, SearchSuggestions, StockSummary


class FieldError(BaseModel):
    field: str
    message: str


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_items: int = Field(alias="totalItems")
    items_per_page: int = Field(alias="itemsPerPage")
    has_next_page: bool = Field(alias="hasNextPage")
    has_prev_page: bool = Field(alias="hasPrevPage")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ProductResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: ProductRead


class ProductListResponse(BaseModel):
    success: bool = True
    data: list[ProductRead]
    pagination: Pagination


class SearchResponse(BaseModel):
    success: bool = True
    data: list[ProductRead]
    suggestions: SearchSuggestions


class StockResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: StockSummary


class BulkItemError(BaseModel):
    index: int
    errors: list[FieldError]


class BulkCreateResult(BaseModel):
    created: int
    failed: int
    products: list[ProductRead]
    errors: list[BulkItemError] = Field(default_factory=list)


class BulkCreateResponse(BaseModel):
    success: bool = True
    message: str
    data: BulkCreateResult
