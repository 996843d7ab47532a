# barbershop/deps.py

from fastapi import Depends, HTTPException

from barbershop.auth import get_current_user
from barbershop.schemas import UserRole

ADMIN_ROLES = (UserRole.admin.value, UserRole.super_admin.value)


def require_role(user: dict, *roles: str):
    if user["role"] not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_admin_user(current_user: dict = Depends(get_current_user)) -> dict:
    require_role(current_user, *ADMIN_ROLES)
    return current_user


def get_super_admin_user(current_user: dict = Depends(get_current_user)) -> dict:
    require_role(current_user, UserRole.super_admin.value)
    return current_user
