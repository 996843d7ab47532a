# barbershop/routers/users_routes.py

from fastapi import APIRouter, Depends

from barbershop.deps import get_admin_user
from barbershop.schemas import UserPublic

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_admin_user)):
    return {
        "id": current_user["id"],
        "email": current_user["email"],
        "role": current_user["role"],
    }
