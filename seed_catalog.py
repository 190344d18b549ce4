# seed_catalog.py

from catalog.core.config import get_settings
from catalog.core.logging_config import configure_logging
from catalog.database import Database
from catalog.seed import seed_products


def main():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    db = Database.from_settings(settings)
    db.connect()
    try:
        with db.session() as session:
            products = seed_products(session)
            for index, product in enumerate(products, start=1):
                print(f"{index}. {product.name} - ${product.price_cents / 100:.2f} ({product.category})")
    finally:
        db.disconnect()

    print("Database seeded successfully!")


if __name__ == "__main__":
    main()
