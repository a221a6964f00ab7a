# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, status: str):
        send_order_notification_task.delay(user_id, order_id, status)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, status: str):
    """
    Delivery channel (email, push) lives outside this service, the task only logs.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} is {status}")
    return {"user_id": user_id, "order_id": order_id, "status": status}
