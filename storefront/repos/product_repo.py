# storefront/repos/product_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.product import ProductModel
from storefront.data.models.variant import ProductVariantModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    # products
    def list_products(self, with_variants: bool = False) -> list[ProductModel]:
        stmt = select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        if with_variants:
            stmt = stmt.options(selectinload(ProductModel.variants))
        return list(self.db.execute(stmt).scalars().all())

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def has_products(self) -> bool:
        return self.db.execute(select(ProductModel.id).limit(1)).first() is not None

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)

    # variants
    def get_variant(self, variant_id: int) -> ProductVariantModel | None:
        return self.db.get(ProductVariantModel, variant_id)

    def list_variants(self, product_id: int) -> list[ProductVariantModel]:
        stmt = (
            select(ProductVariantModel)
            .where(ProductVariantModel.product_id == product_id)
            .order_by(ProductVariantModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_variant(self, product_id: int, size: str, color: str) -> ProductVariantModel | None:
        stmt = (
            select(ProductVariantModel)
            .where(
                ProductVariantModel.product_id == product_id,
                ProductVariantModel.size == size,
                ProductVariantModel.color == color,
            )
            .order_by(ProductVariantModel.id)
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def lock_variants(self, variant_ids) -> dict[int, ProductVariantModel]:
        """SELECT ... FOR UPDATE on the given variants, keyed by id."""
        if not variant_ids:
            return {}
        stmt = (
            select(ProductVariantModel)
            .where(ProductVariantModel.id.in_(variant_ids))
            .order_by(ProductVariantModel.id)
            .with_for_update()
        )
        return {v.id: v for v in self.db.execute(stmt).scalars().all()}

    def sku_exists(self, sku: str) -> bool:
        stmt = select(ProductVariantModel.id).where(ProductVariantModel.sku == sku).limit(1)
        return self.db.execute(stmt).first() is not None

    def add_variant(self, variant: ProductVariantModel) -> ProductVariantModel:
        self.db.add(variant)
        self.db.flush()
        return variant

    def delete_variant(self, variant: ProductVariantModel) -> None:
        self.db.delete(variant)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
