import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from storefront.config import settings
from storefront.domain.exceptions import AuthenticationError
from storefront.domain.models import Principal, User, UserRole

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Хэширование пароля перед сохранением пользователя"""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def create_access_token(user: User) -> str:
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": user.id,
        "role": user.role.value,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Срок действия токена истек")
    except jwt.InvalidTokenError as e:
        logger.info(f"Невалидный токен: {e}")
        raise AuthenticationError("Невалидный токен")

    try:
        return Principal(user_id=payload["sub"], role=UserRole(payload.get("role", "customer")))
    except (KeyError, ValueError):
        raise AuthenticationError("Невалидный токен")
