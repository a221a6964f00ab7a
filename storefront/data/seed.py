# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel, ProductVariantModel
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Wool Coat",
        "description": "A timeless wool coat in premium Italian wool. Minimalist design, relaxed fit.",
        "price": "295.00",
        "variants": [
            ("XS", "Black", "#000000", 5),
            ("S", "Black", "#000000", 10),
            ("M", "Black", "#000000", 15),
            ("L", "Black", "#000000", 12),
            ("XL", "Black", "#000000", 8),
            ("M", "Charcoal", "#3a3a3a", 0),
            ("L", "Navy", "#1a2847", 6),
        ],
    },
    {
        "name": "Cotton T-Shirt",
        "description": "Essential t-shirt in organic cotton. Classic crew neck, relaxed fit.",
        "price": "45.00",
        "variants": [
            ("XS", "White", "#FFFFFF", 20),
            ("S", "White", "#FFFFFF", 25),
            ("M", "White", "#FFFFFF", 30),
            ("L", "White", "#FFFFFF", 20),
            ("XL", "White", "#FFFFFF", 15),
            ("M", "Off-White", "#F8F8F8", 12),
        ],
    },
    {
        "name": "Merino Sweater",
        "description": "Merino wool sweater. Breathable, temperature-regulating and soft.",
        "price": "125.00",
        "variants": [
            ("S", "Navy", "#1a2847", 8),
            ("M", "Navy", "#1a2847", 12),
            ("L", "Navy", "#1a2847", 10),
            ("XL", "Navy", "#1a2847", 5),
            ("M", "Black", "#000000", 15),
        ],
    },
    {
        "name": "Tailored Trousers",
        "description": "Precision-cut trousers in a wool blend with a modern tailored fit.",
        "price": "165.00",
        "variants": [
            ("28", "Charcoal", "#3a3a3a", 6),
            ("30", "Charcoal", "#3a3a3a", 10),
            ("32", "Charcoal", "#3a3a3a", 12),
            ("34", "Charcoal", "#3a3a3a", 8),
            ("32", "Black", "#000000", 10),
        ],
    },
    {
        "name": "Linen Shirt",
        "description": "Lightweight linen shirt with a classic collar and button front.",
        "price": "85.00",
        "variants": [
            ("S", "Beige", "#d4c5b0", 15),
            ("M", "Beige", "#d4c5b0", 20),
            ("L", "Beige", "#d4c5b0", 15),
            ("M", "White", "#FFFFFF", 18),
        ],
    },
    {
        "name": "Cashmere Scarf",
        "description": "Pure cashmere scarf, soft and warm.",
        "price": "95.00",
        "variants": [
            ("One Size", "Black", "#000000", 25),
            ("One Size", "Charcoal", "#3a3a3a", 20),
        ],
    },
]


def seed():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        repo = ProductRepo(db)
        # not forcing: only seed if empty
        if repo.has_products():
            logger.info("Catalog not empty, skipping seed")
            return

        for data in SAMPLE_PRODUCTS:
            product = repo.add_product(
                ProductModel(
                    name=data["name"],
                    description=data["description"],
                    price=Decimal(data["price"]),
                    images=[],
                )
            )
            for size, color, color_hex, stock in data["variants"]:
                repo.add_variant(
                    ProductVariantModel(
                        product_id=product.id,
                        size=size,
                        color=color,
                        color_hex=color_hex,
                        stock=stock,
                    )
                )
            logger.info(f"Created product {product.name} with {len(data['variants'])} variants")

        repo.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
