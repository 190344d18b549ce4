# catalog/routers/products.py
from decimal import Decimal

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    Query,
    Request,
    status,
)
from sqlmodel import Session

from catalog.core.auth import require_admin
from catalog.database import get_session
from catalog.models.product import Category
from catalog.repositories.product_repo import ProductRepository
from catalog.repositories.stats_repo import StatsRepository
from catalog.schemas.common import (
    BulkCreateResponse,
    ProductListResponse,
    ProductResponse,
    SearchResponse,
    StockResponse,
)
from catalog.schemas.product import (
    BulkCreateRequest,
    ProductCreate,
    ProductQuery,
    ProductRead,
    ProductUpdate,
    SortKey,
    StockAdjustment,
    StockSummary,
)
from catalog.schemas.stats import StatsResponse
from catalog.services.product_service import ProductService, parse_product_id
from catalog.services.stats_service import StatsService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)
stats_service = StatsService(StatsRepository())


# -------- Public endpoints --------


def product_query(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort: SortKey | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
    category: Category | None = Query(default=None),
    brand: str | None = Query(default=None, max_length=100),
    in_stock: bool | None = Query(default=None, alias="inStock"),
    min_price: Decimal | None = Query(default=None, ge=0, alias="minPrice"),
    max_price: Decimal | None = Query(default=None, ge=0, alias="maxPrice"),
    is_featured: bool | None = Query(default=None, alias="isFeatured"),
) -> ProductQuery:
    """Collect list filters from the query string (camelCase names)."""
    return ProductQuery(
        page=page,
        limit=limit,
        sort=sort,
        search=search,
        category=category,
        brand=brand,
        in_stock=in_stock,
        min_price=min_price,
        max_price=max_price,
        is_featured=is_featured,
    )


@router.get("", response_model=ProductListResponse)
def list_products(
    query: ProductQuery = Depends(product_query),
    session: Session = Depends(get_session),
):
    """
    List active products.

    Filters (all optional): search, category, brand, inStock,
    minPrice, maxPrice, isFeatured. Pagination via page/limit,
    ordering via sort (name, price, createdAt; "-" for descending).
    """
    products, pagination = service.list_products(session, query)
    return ProductListResponse(
        data=[ProductRead.from_model(p) for p in products],
        pagination=pagination,
    )


@router.get("/search", response_model=SearchResponse)
def search_products(
    q: str = Query(default=""),
    limit: int = Query(default=10, ge=1, le=50),
    session: Session = Depends(get_session),
):
    """
    Text search across name, brand and description.

    - `q` must be at least 2 characters.
    - Also returns matching brand and category suggestions.
    """
    products, suggestions = service.search(session, q, limit=limit)
    return SearchResponse(
        data=[ProductRead.from_model(p) for p in products],
        suggestions=suggestions,
    )


@router.get("/stats", response_model=StatsResponse)
def get_catalog_stats(session: Session = Depends(get_session)):
    """Catalog-wide counts and averages, grouped by category."""
    return StatsResponse(data=stats_service.get_catalog_stats(session))


@router.get("/category/{category}", response_model=ProductListResponse)
def list_products_by_category(
    category: Category,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """
    In-stock products of a single category, newest first.
    """
    products, pagination = service.list_by_category(session, category, page, limit)
    return ProductListResponse(
        data=[ProductRead.from_model(p) for p in products],
        pagination=pagination,
    )


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
):
    """
    Get a single active product by id.

    - Public endpoint.
    - Records a view after the response is sent.
    """
    product = service.get_product(session, parse_product_id(product_id))
    background_tasks.add_task(service.record_view, request.app.state.db, product.id)
    return ProductResponse(data=ProductRead.from_model(product))


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).
    """
    product = service.create_product(session, payload)
    return ProductResponse(
        message="Product created successfully",
        data=ProductRead.from_model(product),
    )


@router.post(
    "/bulk",
    response_model=BulkCreateResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def bulk_create_products(
    payload: BulkCreateRequest,
    session: Session = Depends(get_session),
):
    """
    Create 1 to 100 products (admin only).

    Invalid items are skipped and reported; valid ones are still created.
    """
    result = service.bulk_create(session, payload.products)
    return BulkCreateResponse(
        message=f"{result.created} products created successfully",
        data=result,
    )


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only).
    """
    product = service.update_product(session, parse_product_id(product_id), payload)
    return ProductResponse(
        message="Product updated successfully",
        data=ProductRead.from_model(product),
    )


@router.patch(
    "/{product_id}/stock",
    response_model=StockResponse,
    dependencies=[Depends(require_admin)],
)
def adjust_stock(
    product_id: str,
    payload: StockAdjustment,
    session: Session = Depends(get_session),
):
    """
    Add (or, with a negative quantity, remove) stock units (admin only).

    Stock never drops below zero; inStock follows the new quantity.
    """
    product = service.adjust_stock(session, parse_product_id(product_id), payload.quantity)
    return StockResponse(
        message="Stock updated successfully",
        data=StockSummary(
            id=product.id,
            name=product.name,
            stock_quantity=product.stock_quantity,
            in_stock=product.in_stock,
            is_low_stock=product.is_low_stock,
            low_stock_threshold=product.low_stock_threshold,
        ),
    )


@router.patch(
    "/{product_id}/toggle-featured",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
def toggle_featured(
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Flip the featured flag (admin only).
    """
    product = service.toggle_featured(session, parse_product_id(product_id))
    state = "featured" if product.is_featured else "unfeatured"
    return ProductResponse(
        message=f"Product {state} successfully",
        data=ProductRead.from_model(product),
    )


@router.delete(
    "/{product_id}/permanent",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
def hard_delete_product(
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Permanently delete a product (admin only). Irreversible.
    """
    snapshot = service.hard_delete(session, parse_product_id(product_id))
    return ProductResponse(message="Product permanently deleted", data=snapshot)


@router.delete(
    "/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
def soft_delete_product(
    product_id: str,
    session: Session = Depends(get_session),
):
    """
    Deactivate a product (admin only). The record is kept.
    """
    product = service.soft_delete(session, parse_product_id(product_id))
    return ProductResponse(
        message="Product deactivated successfully",
        data=ProductRead.from_model(product),
    )
