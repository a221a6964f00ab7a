# storefront/services/product_import.py
"""
Import of WooCommerce-style CSV exports.

Rows of type ``variable`` are products, rows of type ``variation`` are their
size/color variants. A variation belongs to the parent whose SKU is the
first dash-separated part of its own SKU (``MH01-L-Black`` -> ``MH01``).
"""
import csv
import io
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.variant import ProductVariantModel
from storefront.repos.product_repo import ProductRepo
from storefront.services.feed_client import FeedClient
from storefront.utils.settings import PRODUCT_IMPORT_LIMIT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

KNOWN_SIZES = {"XS", "S", "M", "L", "XL", "XXL", "28", "29", "30", "31", "32", "33", "34", "36"}
DEFAULT_SIZE = "M"
DEFAULT_COLOR = "Black"
DEFAULT_STOCK = 100
DEFAULT_PRICE = Decimal("50")
DESCRIPTION_MAX = 500

COLOR_HEX = {
    "Black": "#000000",
    "White": "#FFFFFF",
    "Gray": "#808080",
    "Grey": "#808080",
    "Orange": "#FF8C00",
    "Purple": "#800080",
    "Red": "#DC143C",
    "Blue": "#4169E1",
    "Green": "#228B22",
    "Yellow": "#FFD700",
    "Beige": "#F5F5DC",
    "Brown": "#8B4513",
    "Khaki": "#F0E68C",
    "Navy": "#000080",
    "Cream": "#FFFDD0",
    "Charcoal": "#36454F",
}
UNKNOWN_COLOR_HEX = "#808080"

_TAG = re.compile(r"<[^>]*>")
_SPACES = re.compile(r"\s+")


def strip_html(html: str) -> str:
    text = _TAG.sub(" ", html or "")
    text = text.replace("&bull;", "•").replace("&nbsp;", " ")
    return _SPACES.sub(" ", text).strip()


def size_from_sku(sku: str) -> str:
    parts = sku.split("-")
    if len(parts) >= 2 and parts[1] in KNOWN_SIZES:
        return parts[1]
    return DEFAULT_SIZE


def color_from_sku(sku: str) -> str:
    parts = sku.split("-")
    if len(parts) >= 3:
        return " ".join(parts[2:])
    return DEFAULT_COLOR


def color_hex(color: str) -> str:
    return COLOR_HEX.get(color, UNKNOWN_COLOR_HEX)


def parse_stock(value: str) -> int:
    # blank or garbage means "not tracked", an explicit 0 stays 0
    try:
        stock = int(str(value).strip())
    except ValueError:
        return DEFAULT_STOCK
    return max(stock, 0)


def parse_price(*candidates) -> Decimal:
    for value in candidates:
        if value is None or not str(value).strip():
            continue
        try:
            return Decimal(str(value).strip()).quantize(Decimal("0.01"))
        except InvalidOperation:
            continue
    return DEFAULT_PRICE.quantize(Decimal("0.01"))


def first_image(value: str) -> str | None:
    for url in (value or "").split(","):
        if url.strip():
            return url.strip()
    return None


def group_rows(rows) -> dict:
    """Parent SKU -> {"parent": row | None, "variations": [rows]}, in file order."""
    groups: dict = {}
    for row in rows:
        kind = (row.get("Type") or "").strip()
        sku = (row.get("SKU") or "").strip()
        if not sku:
            continue
        if kind == "variable":
            groups.setdefault(sku, {"parent": None, "variations": []})["parent"] = row
        elif kind == "variation":
            parent_sku = sku.split("-")[0]
            groups.setdefault(parent_sku, {"parent": None, "variations": []})["variations"].append(row)
    return groups


def load_source(source: str, feed_client: FeedClient | None = None) -> str:
    if source.startswith(("http://", "https://")):
        return (feed_client or FeedClient()).fetch_text(source)
    return Path(source).read_text(encoding="utf-8")


class ProductImporter:
    def __init__(self, db: Session, feed_client: FeedClient | None = None, limit: int = PRODUCT_IMPORT_LIMIT):
        self.repo = ProductRepo(db)
        self.feed_client = feed_client
        self.limit = limit

    def import_source(self, source: str) -> dict:
        logger.info(f"Starting product import from {source}")
        return self.import_csv(load_source(source, self.feed_client))

    def import_csv(self, content: str) -> dict:
        rows = list(csv.DictReader(io.StringIO(content)))
        groups = group_rows(rows)
        logger.info(f"Parsed {len(rows)} rows, {len(groups)} product groups")

        imported, variant_count, skipped = 0, 0, []

        for sku, group in groups.items():
            parent, variations = group["parent"], group["variations"]

            if not parent or not variations:
                logger.info(f"Skipping {sku}: missing parent or variations")
                skipped.append(sku)
                continue

            if any(self.repo.sku_exists(v["SKU"].strip()) for v in variations):
                logger.info(f"Skipping {sku}: already imported")
                skipped.append(sku)
                continue

            if imported >= self.limit:
                logger.info(f"Reached limit of {self.limit} products, stopping import")
                break

            name = parent.get("Name", "").strip() or sku
            description = strip_html(
                parent.get("description") or parent.get("Short description") or f"Premium {name}"
            )[:DESCRIPTION_MAX]

            product = self.repo.add_product(
                ProductModel(
                    name=name,
                    description=description,
                    price=parse_price(parent.get("Regular price"), variations[0].get("Regular price")),
                    image_src=first_image(parent.get("Images")),
                    images=[u.strip() for u in (parent.get("Images") or "").split(",") if u.strip()],
                )
            )

            seen = set()
            for row in variations:
                variant_sku = row["SKU"].strip()
                if variant_sku in seen:
                    continue
                seen.add(variant_sku)

                color = color_from_sku(variant_sku)
                self.repo.add_variant(
                    ProductVariantModel(
                        product_id=product.id,
                        size=size_from_sku(variant_sku),
                        color=color,
                        color_hex=color_hex(color),
                        stock=parse_stock(row.get("Stock", "")),
                        sku=variant_sku,
                    )
                )
                variant_count += 1

            imported += 1
            logger.info(f"Imported product {name} ({product.id}) with {len(seen)} variants")

        self.repo.commit()
        logger.info(f"Import complete: {imported} products, {variant_count} variants")

        return {"products": imported, "variants": variant_count, "skipped": skipped}
