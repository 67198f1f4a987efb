from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from todo_app.core.config import settings

def create_access_token(user_id: str, email: str) -> str:

    #crée un token d'accès JWT de 15 minutes
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MIN),
        "type": "access"
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")

def create_refresh_token(user_id: str, email: str) -> str:
    #crée un token de rafraîchissement JWT au bout de 30 jours
    payload = {
        "user_id": user_id,
        "email": email,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_REFRESH_EXPIRE_MIN),
        "type": "refresh"
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")

def verify_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    except JWTError:
        return None

def decode_token(token: str) -> Optional[str]:
    # Seuls les tokens d'accès identifient un utilisateur
    payload = verify_token(token)
    if payload is None or payload.get("type") != "access":
        return None
    return payload.get("user_id")
