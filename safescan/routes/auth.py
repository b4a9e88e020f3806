"""Account routes: register, log in, and look up the caller."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from safescan.db import get_db
from safescan.schemas import UserCreate, UserLogin, UserOut, AuthOut
from safescan.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
):
    """Resolve `Authorization: Bearer <token>` to a user or fail with 401."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authorized")
    user = auth_service.get_user_for_token(db, credentials.credentials)
    if not user:
        raise HTTPException(status_code=401, detail="Not authorized")
    return user


@router.post("/register", status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    if auth_service.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="User already exists")
    user = auth_service.create_user(db, payload.email, payload.password, payload.name)
    token = auth_service.issue_token(db, user)
    return {
        "data": AuthOut(user=UserOut.model_validate(user), token=token),
        "message": "User registered successfully",
    }


@router.post("/login")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, payload.email, payload.password)
    if not user:
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = auth_service.issue_token(db, user)
    logger.info("User %s logged in", user.user_id)
    return {
        "data": AuthOut(user=UserOut.model_validate(user), token=token),
        "message": "Login successful",
    }


@router.get("/me")
def me(user=Depends(get_current_user)):
    return {"data": UserOut.model_validate(user)}


@router.post("/logout")
def logout(
    user=Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
):
    auth_service.revoke_token(db, credentials.credentials)
    logger.info("User %s logged out", user.user_id)
    return {"data": None, "message": "Logged out"}
