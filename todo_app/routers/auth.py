from fastapi import APIRouter, Depends, HTTPException, status, Header
from sqlalchemy.orm import Session
from typing import Optional
from todo_app.core.database import get_db
from todo_app.core.errors import AuthenticationFailure
from todo_app.core.security import create_access_token, create_refresh_token, verify_token
from todo_app.models.user import User
from todo_app.schemas.user import UserCreate, UserResponse, LoginRequest, TokenResponse, MeResponse
from todo_app.services.identity import AuthSession

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_session(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None)
) -> AuthSession:
    """Session restaurée depuis le header Authorization (401 sinon)"""
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    session = AuthSession(db)
    token = authorization.replace("Bearer ", "")
    if not session.restore(token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return session


@router.post("/signup", response_model=UserResponse)
def signup(user_data: UserCreate, db: Session = Depends(get_db)):
    """Créer un nouvel utilisateur"""
    session = AuthSession(db)
    try:
        session.sign_up(user_data.email, user_data.password)
    except AuthenticationFailure as e:
        raise HTTPException(status_code=400, detail=str(e))

    return session.current_user

@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Se connecter et recevoir les tokens"""
    session = AuthSession(db)
    try:
        user_id = session.sign_in(credentials.email, credentials.password)
    except AuthenticationFailure as e:
        raise HTTPException(status_code=401, detail=str(e))

    return {
        "access_token": create_access_token(user_id, credentials.email),
        "refresh_token": create_refresh_token(user_id, credentials.email),
        "token_type": "bearer"
    }

@router.post("/refresh", response_model=TokenResponse)
def refresh(refresh_token: str, db: Session = Depends(get_db)):
    """Utiliser un refresh_token pour obtenir un nouvel access_token"""

    # Vérifie le refresh_token
    payload = verify_token(refresh_token)
    if not payload or payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user_id = payload.get("user_id")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    return {
        "access_token": create_access_token(user.id, user.email),
        "refresh_token": refresh_token,
        "token_type": "bearer"
    }

@router.get("/me", response_model=MeResponse)
def me(session: AuthSession = Depends(get_auth_session)):
    user = session.current_user
    return {
        "uid": session.current_user_id,
        "email": user.email if user else None,
        "route": session.initial_route()
    }

@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(session: AuthSession = Depends(get_auth_session)):
    # JWT sans état : le client jette ses tokens
    session.sign_out()
