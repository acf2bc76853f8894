# barbastore/routers/auth_routes.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm

from barbastore.auth import verify_password, create_access_token
from barbastore.container import Container
from barbastore.deps import get_container
from barbastore.schemas import Token

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    container: Container = Depends(get_container),
):
    # OAuth2 password flow calls the email "username"
    user = container.users.find_by_email(form_data.username)

    if user is None or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": user.email})
    return {"access_token": token, "token_type": "bearer"}
