from datetime import datetime

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.orm import Session

from cleanstock.database import get_db
from cleanstock.models.user import User, UserRole
from cleanstock.services import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])

bearer_scheme = HTTPBearer(auto_error=False)


class RegisterRequest(BaseModel):
    name: str
    role: UserRole
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: str
    name: str
    role: UserRole
    email: str

    model_config = {"from_attributes": True}


class ActivityLogOut(BaseModel):
    id: str
    user_id: str
    email: str
    action: str
    detail: str
    ip_address: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


def client_ip(request: Request) -> str:
    return request.client.host if request.client else ""


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Dependency: resolve the bearer token to a user and attach it to the request."""
    token = credentials.credentials if credentials else None
    user = auth_service.verify(db, token)
    request.state.user = user
    return user


@router.post("/register", status_code=201)
def register(data: RegisterRequest, request: Request, db: Session = Depends(get_db)):
    user = auth_service.register(db, data.name, data.role, data.email, data.password)
    auth_service.log_activity(db, user, "register", ip=client_ip(request))
    return {"message": "User registered successfully", "user": UserOut.model_validate(user)}


@router.post("/login")
def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, data.email, data.password)
    auth_service.log_activity(db, user, "login", ip=client_ip(request))
    return {"token": token, "user": UserOut.model_validate(user)}


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


@router.get("/activity", response_model=list[ActivityLogOut])
def activity_logs(
    limit: int = 100,
    user_id: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return auth_service.get_activity_logs(db, limit=limit, user_id=user_id)
