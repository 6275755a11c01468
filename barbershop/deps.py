# barbershop/deps.py

from datetime import datetime

from fastapi import Depends, HTTPException

from barbershop.auth import get_current_admin
from barbershop.core import shop_now
from barbershop.services.notifications import NotificationSender, default_sender


def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")


def require_admin(current_user: dict = Depends(get_current_admin)) -> dict:
    require_role(current_user, "admin")
    return current_user


def get_now() -> datetime:
    return shop_now()


def get_notifier() -> NotificationSender:
    return default_sender()
