# barbershop/routers/services_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.db import get_session
from barbershop.deps import get_admin_user
from barbershop.logging_config import setup_logger
from barbershop.models import Service
from barbershop.schemas import ServicePublic, ServiceUpdate

logger = setup_logger(__name__)

router = APIRouter(
    tags=["services"],
)


@router.get("/services", response_model=List[ServicePublic])
def list_services(
    include_inactive: bool = False,
    session: Session = Depends(get_session),
):
    stmt = select(Service)
    if not include_inactive:
        stmt = stmt.where(Service.active == True)  # noqa: E712
    return session.exec(stmt.order_by(Service.sort_order, Service.id)).all()


@router.patch("/admin/services/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    updates: ServiceUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_admin_user),
):
    service = session.get(Service, service_id)
    if service is None:
        raise HTTPException(status_code=404, detail="Service not found")

    changes = updates.model_dump(exclude_unset=True)
    if any(v is None for v in changes.values()):
        raise HTTPException(status_code=422, detail="Service fields cannot be cleared")

    for field, value in changes.items():
        setattr(service, field, value)

    session.add(service)
    session.commit()
    session.refresh(service)

    logger.info("%s updated service %s: %s", current_user["email"], service_id, sorted(changes))
    return service
