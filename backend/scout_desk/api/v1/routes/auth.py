from fastapi import APIRouter, Depends, HTTPException

from scout_desk.api.deps import Container, current_viewer, get_container, store_http_error, viewer_token
from scout_desk.schemas.user import LoginRequest, LoginResponse, RegistrationRequest, UserPublic
from scout_desk.services.repository import StoreWriteError
from scout_desk.services.store_client import StoreNotConfigured, StoreReadError
from scout_desk.services.users import AuthenticationError, PendingApprovalError, RegistrationError

router = APIRouter()


@router.post("/register", response_model=UserPublic)
def register(payload: RegistrationRequest, container: Container = Depends(get_container)) -> UserPublic:
    try:
        return container.users.register(payload)
    except RegistrationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (StoreNotConfigured, StoreReadError, StoreWriteError) as exc:
        raise store_http_error(exc)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, container: Container = Depends(get_container)) -> LoginResponse:
    """Check credentials and hand out a bearer token for this client."""
    try:
        user = container.users.authenticate(payload.username, payload.password)
    except PendingApprovalError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except AuthenticationError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    return LoginResponse(access_token=container.session.open(user), user=user)


@router.post("/logout")
def logout(token: str = Depends(viewer_token), container: Container = Depends(get_container)) -> dict:
    container.session.close(token)
    return {"status": "logged_out"}


@router.get("/me", response_model=UserPublic)
def me(viewer: UserPublic = Depends(current_viewer)) -> UserPublic:
    return viewer
