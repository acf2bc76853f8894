# barbastore/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException

from barbastore.auth import hash_password
from barbastore.container import Container
from barbastore.data import User
from barbastore.deps import get_container, get_current_user
from barbastore.schemas import UserCreate, UserPublic

router = APIRouter(
    tags=["users"],
)


@router.get("/me", response_model=UserPublic)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/users", status_code=201, response_model=UserPublic)
def create_user(
    user: UserCreate,
    container: Container = Depends(get_container),
):
    # signup always creates clients; barbers are added by an admin
    if container.users.find_by_email(user.email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    new_user = User(
        id=container.users.next_id(),
        name=user.name,
        email=user.email,
        password_hash=hash_password(user.password),
        role="client",
    )
    try:
        container.users.add(new_user)
    except KeyError:
        raise HTTPException(status_code=409, detail="Email already registered")
    return new_user
