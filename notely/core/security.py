from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from notely.core.config import settings


@dataclass
class Identity:
    """Ce que le fournisseur d'identité garantit: un id vérifié et un email"""
    id: int
    email: str
    metadata: dict = field(default_factory=dict)


def _encode(user_id: int, email: str, minutes: int, token_type: str, metadata: Optional[dict] = None) -> str:
    payload = {
        "user_id": user_id,
        "email": email,
        "user_metadata": metadata or {},
        "exp": datetime.utcnow() + timedelta(minutes=minutes),
        "type": token_type
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")

def create_access_token(user_id: int, email: str, metadata: Optional[dict] = None) -> str:
    #crée un token d'accès JWT de 15 minutes
    return _encode(user_id, email, settings.JWT_EXPIRE_MIN, "access", metadata)

def create_refresh_token(user_id: int, email: str) -> str:
    #crée un token de rafraîchissement JWT au bout de 30 jours
    return _encode(user_id, email, settings.JWT_REFRESH_EXPIRE_MIN, "refresh")

def verify_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
        return payload
    except JWTError:
        return None


def resolve_identity(token: str) -> Optional[Identity]:
    """Token d'accès -> Identity, None si invalide, expiré ou si c'est un refresh token"""
    payload = verify_token(token)
    if payload is None or payload.get("type") != "access" or not payload.get("user_id"):
        return None
    return Identity(
        id=payload["user_id"],
        email=payload.get("email", ""),
        metadata=payload.get("user_metadata") or {},
    )
