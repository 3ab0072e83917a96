# petspa/routers/users_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from petspa.db import get_session
from petspa.models import User
from petspa.schemas import UserCreate, UserPublic, UserRole
from petspa.auth import get_current_user, hash_password
from petspa.config import ADMIN_EMAILS

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["users"],
)

@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return {
        "id": current_user["id"],
        "email": current_user["email"],
        "role": current_user["role"],
    }


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Admin accounts only for allow-listed e-mails
    if user.role == UserRole.admin and user.email.lower() not in ADMIN_EMAILS:
        raise HTTPException(status_code=403, detail="E-mail not allowed to register as admin")

    # 2) Check if email already exists
    existing = session.exec(
        select(User).where(User.email == user.email)
    ).first()
    if existing is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    # 3) Create user in DB
    db_user = User(
        email=user.email,
        password_hash=hash_password(user.password),
        role=user.role.value,
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id
    logger.info("user %s registered as %s", db_user.email, db_user.role)

    return {
        "id": db_user.id,
        "email": db_user.email,
        "role": db_user.role,
    }
