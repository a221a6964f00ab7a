# storefront/tasks/import_products.py
from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.services.product_import import ProductImporter
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.import_products.import_products_task")
def import_products_task(source: str):
    logger.info(f"Import products task started for {source}")

    db = SessionLocal()
    try:
        return ProductImporter(db).import_source(source)
    except Exception:
        db.rollback()
        logger.exception(f"Product import from {source} failed")
        raise
    finally:
        db.close()
