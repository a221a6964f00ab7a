"""Tests for the CSV catalog import."""

from decimal import Decimal

import pytest

from storefront.data.models import ProductModel, ProductVariantModel
from storefront.services.product_import import (
    ProductImporter,
    color_from_sku,
    color_hex,
    load_source,
    parse_stock,
    size_from_sku,
    strip_html,
)

CSV = """ID,Type,SKU,Name,Regular price,Sale price,Stock,In stock?,Categories,description,Short description,Images,Attribute 1 name,Attribute 1 value(s),Attribute 2 name,Attribute 2 value(s)
1,variable,MH01,Chaz Hoodie,52,,,1,Men,"<p>Soft <b>fleece</b>&nbsp;hoodie</p>",,"https://cdn.example.com/mh01.png, https://cdn.example.com/mh01-b.png",Size,"S, L",Color,"Black, Gray"
2,variation,MH01-S-Black,Chaz Hoodie - S Black,52,,12,1,,,,,Size,S,Color,Black
3,variation,MH01-L-Gray,Chaz Hoodie - L Gray,52,,,1,,,,,Size,L,Color,Gray
4,variation,MH01-L-Gray,duplicate row,52,,3,1,,,,,Size,L,Color,Gray
5,variable,MJ02,Lonely Jacket,80,,,1,Men,Jacket,,,,,,
6,variation,WS03-XS-Sky-Blue,Tee XS Sky Blue,,,0,1,,,,,,,,
7,variable,WS03,Tee,,,,1,Women,,Plain tee,,,,,
"""


class TestHelpers:
    def test_strip_html(self):
        assert strip_html("<p>Soft <b>fleece</b>&nbsp;hoodie</p>") == "Soft fleece hoodie"
        assert strip_html("<li>a</li>&bull;<li>b</li>") == "a • b"

    @pytest.mark.parametrize(
        "sku,size",
        [("MH01-L-Black", "L"), ("MP01-32-Blue", "32"), ("MH01-Huge-Black", "M"), ("MH01", "M")],
    )
    def test_size_from_sku(self, sku, size):
        assert size_from_sku(sku) == size

    @pytest.mark.parametrize(
        "sku,color",
        [("MH01-L-Black", "Black"), ("WS03-XS-Sky-Blue", "Sky Blue"), ("MH01-L", "Black")],
    )
    def test_color_from_sku(self, sku, color):
        assert color_from_sku(sku) == color

    def test_color_hex(self):
        assert color_hex("Navy") == "#000080"
        assert color_hex("Sky Blue") == "#808080"

    @pytest.mark.parametrize("raw,stock", [("12", 12), ("0", 0), ("", 100), ("n/a", 100), ("-4", 0)])
    def test_parse_stock(self, raw, stock):
        assert parse_stock(raw) == stock


class TestImport:
    def test_imports_products_with_variants(self, db):
        summary = ProductImporter(db).import_csv(CSV)

        assert summary["products"] == 2
        assert summary["variants"] == 3
        assert summary["skipped"] == ["MJ02"]

        hoodie = db.query(ProductModel).filter_by(name="Chaz Hoodie").one()
        assert hoodie.price == Decimal("52.00")
        assert hoodie.description == "Soft fleece hoodie"
        assert hoodie.image_src == "https://cdn.example.com/mh01.png"
        assert len(hoodie.images) == 2

        variants = db.query(ProductVariantModel).filter_by(product_id=hoodie.id).order_by(ProductVariantModel.id).all()
        assert [(v.size, v.color, v.stock, v.sku) for v in variants] == [
            ("S", "Black", 12, "MH01-S-Black"),
            ("L", "Gray", 100, "MH01-L-Gray"),
        ]

    def test_falls_back_to_defaults(self, db):
        ProductImporter(db).import_csv(CSV)

        tee = db.query(ProductModel).filter_by(name="Tee").one()
        assert tee.price == Decimal("50.00")
        assert tee.description == "Plain tee"
        (variant,) = tee.variants
        assert (variant.size, variant.color, variant.stock) == ("XS", "Sky Blue", 0)

    def test_reimport_skips_known_skus(self, db):
        ProductImporter(db).import_csv(CSV)
        summary = ProductImporter(db).import_csv(CSV)
        assert summary["products"] == 0
        assert db.query(ProductModel).count() == 2

    def test_respects_limit(self, db):
        summary = ProductImporter(db, limit=1).import_csv(CSV)
        assert summary["products"] == 1
        assert db.query(ProductModel).count() == 1


class FakeFeedClient:
    def __init__(self, text):
        self.text = text
        self.urls = []

    def fetch_text(self, url):
        self.urls.append(url)
        return self.text


class TestLoadSource:
    def test_url_goes_through_feed_client(self):
        client = FakeFeedClient(CSV)
        assert load_source("https://feeds.example.com/products.csv", client) == CSV
        assert client.urls == ["https://feeds.example.com/products.csv"]

    def test_local_path(self, tmp_path):
        path = tmp_path / "products.csv"
        path.write_text(CSV, encoding="utf-8")
        assert load_source(str(path)) == CSV

    def test_import_source(self, db):
        summary = ProductImporter(db, feed_client=FakeFeedClient(CSV)).import_source("http://feeds.example.com/p.csv")
        assert summary["products"] == 2
