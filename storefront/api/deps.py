# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import Forbidden, StorefrontError, Unauthorized
from storefront.repos.user_repo import UserRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService


def http_error(e: StorefrontError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.to_dict())


def get_requester(
    user_id: int = Query(..., gt=0),
    db: Session = Depends(get_db),
) -> UserModel:
    # uwierzytelnianie jest poza tym serwisem, tu tylko kto pyta i jaka ma role
    user = UserRepo(db).get_user(user_id)
    if not user:
        raise http_error(Unauthorized("Unknown user"))
    return user


def require_admin(requester: UserModel = Depends(get_requester)) -> UserModel:
    if not requester.is_admin:
        raise http_error(Forbidden("Admin role required"))
    return requester


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_notification_service() -> NotificationService:
    return NotificationService()
