# barbastore/deps.py

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer

from .auth import decode_access_token
from .config import settings
from .container import Container, build_container
from .data import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

_container: Optional[Container] = None


def get_container() -> Container:
    global _container
    if _container is None:
        _container = build_container(settings)
    return _container


def get_current_user(
    token: str = Depends(oauth2_scheme),
    container: Container = Depends(get_container),
) -> User:
    email = decode_access_token(token)
    if email is None:
        raise HTTPException(
            status_code=401,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = container.users.find_by_email(email)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_role(user: User, *roles: str):
    if user.role not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")
