# petspa/deps.py

from fastapi import Depends, HTTPException

from petspa.auth import get_current_user
from petspa.config import ADMIN_EMAILS

def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")

def is_admin(user: dict) -> bool:
    return user["role"] == "admin" and user["email"].lower() in ADMIN_EMAILS

def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    # Role alone isn't enough, the e-mail must be on the allow-list too
    if not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Forbidden")
    return current_user
