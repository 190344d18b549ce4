# catalog/seed.py
"""
Sample catalog data for local development.

Prices are decimal dollars, validated through ProductCreate like any
admin-submitted payload.
"""

import logging
from typing import Any

from sqlalchemy import delete
from sqlmodel import Session

from catalog.models.product import Product
from catalog.repositories.product_repo import ProductRepository
from catalog.schemas.product import ProductCreate
from catalog.services.product_service import ProductService

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS: list[dict[str, Any]] = [
    {
        "name": "Michelin Pilot Sport 4S",
        "brand": "Michelin",
        "price": 299.99,
        "size": "225/45R17",
        "description": (
            "High-performance summer tire designed for sports cars and "
            "high-performance vehicles. Excellent grip, precise handling, "
            "and superior braking performance."
        ),
        "category": "tires",
        "stockQuantity": 50,
        "isFeatured": True,
        "specifications": {
            "season": "summer",
            "speedRating": "Y",
            "loadIndex": "94",
            "Tread Life": "30,000 miles",
        },
        "tags": ["performance", "summer"],
    },
    {
        "name": "Bridgestone Blizzak WS90",
        "brand": "Bridgestone",
        "price": 189.99,
        "size": "215/60R16",
        "description": (
            "Premium winter tire with advanced tread compound for superior "
            "traction on snow and ice."
        ),
        "category": "tires",
        "stockQuantity": 35,
        "specifications": {"season": "winter", "speedRating": "T", "loadIndex": "95"},
        "tags": ["winter", "snow"],
    },
    {
        "name": "Goodyear Eagle F1 Asymmetric",
        "brand": "Goodyear",
        "price": 249.99,
        "size": "245/40R18",
        "description": (
            "Ultra-high performance tire with asymmetric tread pattern for "
            "optimal handling and comfort."
        ),
        "category": "tires",
        "stockQuantity": 28,
        "specifications": {
            "season": "summer",
            "treadPattern": "asymmetric",
            "speedRating": "Y",
            "loadIndex": "97",
        },
    },
    {
        "name": "Continental ExtremeContact DWS06",
        "brand": "Continental",
        "price": 199.99,
        "originalPrice": 229.99,
        "salePrice": 199.99,
        "size": "225/50R17",
        "description": (
            "All-season ultra-high performance tire with dry, wet and light "
            "snow traction."
        ),
        "category": "tires",
        "stockQuantity": 42,
        "specifications": {"season": "all-season", "speedRating": "W"},
    },
    {
        "name": "BBS CH-R 18x8.5",
        "brand": "BBS",
        "price": 459.99,
        "size": "18x8.5",
        "description": "Lightweight flow-formed wheel with a motorsport-derived design.",
        "category": "rims",
        "stockQuantity": 20,
        "isFeatured": True,
        "specifications": {"diameter": "18", "width": "8.5"},
    },
    {
        "name": "Enkei RPF1 17x9",
        "brand": "Enkei",
        "price": 289.99,
        "size": "17x9",
        "description": "Iconic lightweight racing wheel built with MAT process.",
        "category": "rims",
        "stockQuantity": 15,
        "specifications": {"diameter": "17", "width": "9"},
    },
    {
        "name": "Vossen CV3-R 20x10.5",
        "brand": "Vossen",
        "price": 629.99,
        "size": "20x10.5",
        "description": "Concave luxury wheel with a directional spoke design.",
        "category": "rims",
        "stockQuantity": 4,
        "specifications": {"diameter": "20", "width": "10.5"},
    },
    {
        "name": "Method Race Wheels MR502 VT-SPEC",
        "brand": "Method",
        "price": 249.99,
        "size": "15x7",
        "description": "Rally-bred wheel engineered for off-road and gravel use.",
        "category": "rims",
        "stockQuantity": 25,
        "specifications": {"diameter": "15", "width": "7"},
    },
    {
        "name": "Tire Pressure Monitoring System",
        "brand": "JB's Auto",
        "price": 129.99,
        "size": "Universal",
        "description": "Four-sensor TPMS kit with real-time pressure and temperature alerts.",
        "category": "accessories",
        "stockQuantity": 30,
    },
    {
        "name": "Wheel Alignment Service",
        "brand": "JB's Auto",
        "price": 89.99,
        "size": "Service",
        "description": "Four-wheel computerized alignment performed by certified technicians.",
        "category": "services",
        "stockQuantity": 100,
    },
]


def seed_products(session: Session, replace: bool = True) -> list[Product]:
    """
    Insert the sample catalog.

    With replace=True, every existing product row is removed first.
    """
    if replace:
        session.exec(delete(Product))  # type: ignore[call-overload]
        session.commit()
        logger.info("Cleared existing products")

    service = ProductService(ProductRepository())
    created = [
        service.create_product(session, ProductCreate.model_validate(item))
        for item in SAMPLE_PRODUCTS
    ]
    logger.info("Inserted %d sample products", len(created))
    return created
