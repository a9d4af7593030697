"""
Routes des comptes utilisateurs.

Inscription, connexion, vérification d'email, gestion du mot de passe et
du profil.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from ..deps import get_container, get_session, to_response

router = APIRouter(prefix="/users", tags=["users"])


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str
    first_name: str
    last_name: str
    phone: Optional[str] = None


class LoginRequest(BaseModel):
    login: str
    password: str


class TokenRequest(BaseModel):
    token: str


class ResetRequest(BaseModel):
    email: str


class ResetConfirmRequest(BaseModel):
    token: str
    new_password: str


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str


class ProfileUpdateRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None


def _service(container, session: Session):
    return container.user_service(session=session)


@router.post("")
async def register(
    body: RegisterRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    """Inscrit un utilisateur ; le jeton de vérification part par email."""
    result = await _service(container, session).register_user(
        body.username, body.email, body.password, body.first_name, body.last_name, phone=body.phone
    )
    return to_response(result, success_status=201)


@router.post("/login")
async def login(
    body: LoginRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).authenticate(body.login, body.password)
    return to_response(result)


@router.get("/statistics")
async def statistics(container=Depends(get_container), session: Session = Depends(get_session)):
    """Nombre d'utilisateurs par statut."""
    return to_response(await _service(container, session).get_user_statistics())


@router.post("/password-reset")
async def request_password_reset(
    body: ResetRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    return to_response(await _service(container, session).request_password_reset(body.email))


@router.post("/password-reset/confirm")
async def confirm_password_reset(
    body: ResetConfirmRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).reset_password(body.token, body.new_password)
    return to_response(result)


@router.get("/{user_id}")
async def get_user(
    user_id: str, container=Depends(get_container), session: Session = Depends(get_session)
):
    return to_response(await _service(container, session).get_user(user_id))


@router.patch("/{user_id}")
async def update_profile(
    user_id: str,
    body: ProfileUpdateRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).update_profile(
        user_id,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
        avatar=body.avatar,
    )
    return to_response(result)


@router.delete("/{user_id}")
async def deactivate(
    user_id: str, container=Depends(get_container), session: Session = Depends(get_session)
):
    return to_response(await _service(container, session).deactivate_user(user_id))


@router.post("/{user_id}/verify-email")
async def verify_email(
    user_id: str,
    body: TokenRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    return to_response(await _service(container, session).verify_email(user_id, body.token))


@router.post("/{user_id}/password")
async def change_password(
    user_id: str,
    body: PasswordChangeRequest,
    container=Depends(get_container),
    session: Session = Depends(get_session),
):
    result = await _service(container, session).change_password(
        user_id, body.current_password, body.new_password
    )
    return to_response(result)
