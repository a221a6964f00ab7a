import os

# must be set before anything from storefront is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

from decimal import Decimal
from types import SimpleNamespace

import pytest

from storefront.celery_worker import celery_app
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import ProductModel, ProductVariantModel, UserModel

celery_app.conf.task_always_eager = True
celery_app.conf.task_store_eager_result = False


class InMemoryLockService:
    """Same contract as LockService, without Redis."""

    def __init__(self):
        self.locks = {}

    def acquire_checkout_lock(self, user_id, token, ttl):
        if user_id in self.locks:
            return False
        self.locks[user_id] = token
        return True

    def release_checkout_lock(self, user_id, token):
        if self.locks.get(user_id) == token:
            del self.locks[user_id]
            return True
        return False


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id, status):
        self.sent.append((user_id, order_id, status))


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(tables):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def notifier():
    return RecordingNotifier()


def make_product(db, name, price, variants, allow_backorder=False):
    """variants: list of (size, color, stock)"""
    product = ProductModel(
        name=name,
        description=f"{name} description",
        price=Decimal(price),
        images=[],
        allow_backorder=allow_backorder,
    )
    db.add(product)
    db.flush()
    created = []
    for size, color, stock in variants:
        variant = ProductVariantModel(
            product_id=product.id,
            size=size,
            color=color,
            color_hex="#000000",
            stock=stock,
        )
        db.add(variant)
        db.flush()
        created.append(variant)
    return product, created


@pytest.fixture
def catalog(db):
    """
    Wool Coat 295.00: M/Black (no stock), L/Black (5)
    Merino Sweater 125.00: M/Navy (12)
    users: 1 shopper, 2 shopper, 99 admin
    """
    db.add_all(
        [
            UserModel(id=1, name="Alice", email="alice@example.com"),
            UserModel(id=2, name="Bob", email="bob@example.com"),
            UserModel(id=99, name="Owner", email="owner@example.com", is_admin=True),
        ]
    )
    coat, (coat_m, coat_l) = make_product(
        db, "Wool Coat", "295.00", [("M", "Black", 0), ("L", "Black", 5)]
    )
    sweater, (sweater_m,) = make_product(db, "Merino Sweater", "125.00", [("M", "Navy", 12)])
    db.commit()

    return SimpleNamespace(
        user_id=1,
        other_user_id=2,
        admin_id=99,
        coat_id=coat.id,
        coat_m_black_id=coat_m.id,
        coat_l_black_id=coat_l.id,
        sweater_id=sweater.id,
        sweater_m_navy_id=sweater_m.id,
    )


@pytest.fixture
def product_factory(db):
    def factory(name, price, variants, allow_backorder=False):
        product, created = make_product(db, name, price, variants, allow_backorder)
        db.commit()
        return product, created

    return factory
