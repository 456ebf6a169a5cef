# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_PLACED = "ORDER_PLACED"
STATUS_CHANGED = "STATUS_CHANGED"


class NotificationService:
    """
    Powiadomienia o zamowieniach.
    Wysylane przez Celery dopiero po commicie, zamowienie juz istnieje,
    wiec blad kolejki tylko logujemy.
    """

    def send_order_placed(self, user_id: int, order_id: int, order_number: str):
        self._dispatch(user_id, order_id, ORDER_PLACED, {"order_number": order_number})

    def send_status_changed(self, user_id: int, order_id: int, status: str):
        self._dispatch(user_id, order_id, STATUS_CHANGED, {"status": status})

    def _dispatch(self, user_id: int, order_id: int, event: str, payload: dict):
        try:
            send_order_notification_task.delay(user_id, order_id, event, payload)
        except Exception as e:
            logger.warning(f"Nie udalo sie zakolejkowac powiadomienia {event} dla zamowienia {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, event: str, payload: dict):
    """
    Celery task - w prawdziwym systemie email/SMS.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} {event} {payload}")
    return {"user_id": user_id, "order_id": order_id, "event": event, "status": "sent"}
