from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from scout_desk.api.deps import Container, get_container, require_admin, store_http_error, viewer_token
from scout_desk.schemas.user import UserPublic, UserRole
from scout_desk.services.repository import StoreWriteError
from scout_desk.services.store_client import StoreNotConfigured
from scout_desk.services.users import UserNotFound

router = APIRouter(dependencies=[Depends(require_admin)])


class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None


@router.get("/pending", response_model=List[UserPublic])
def pending_users(container: Container = Depends(get_container)) -> List[UserPublic]:
    return container.users.pending()


@router.post("/{user_id}/approve", response_model=UserPublic)
def approve_user(user_id: str, container: Container = Depends(get_container)) -> UserPublic:
    try:
        return container.users.approve(user_id)
    except UserNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)


@router.post("/{user_id}/reject")
def reject_user(user_id: str, container: Container = Depends(get_container)) -> dict:
    try:
        container.users.reject(user_id)
    except UserNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)
    return {"rejected": user_id}


@router.put("/{user_id}", response_model=UserPublic)
def update_user(
    user_id: str,
    payload: UserUpdate,
    container: Container = Depends(get_container),
    admin: UserPublic = Depends(require_admin),
    token: str = Depends(viewer_token),
) -> UserPublic:
    try:
        updated = container.users.update(user_id, **payload.model_dump())
    except UserNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)
    if admin.id == updated.id:
        container.session.save(token, updated)
    return updated
