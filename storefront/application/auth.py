import logging
import uuid
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel

from storefront.domain.models import User, UserRole, Principal
from storefront.domain.exceptions import (
    AuthenticationError, UserAlreadyExistsError, ValidationError,
)
from storefront.infrastructure.security import (
    hash_password, verify_password, create_access_token, decode_access_token,
)

logger = logging.getLogger(__name__)


class RegisterDTO(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str


class ProfileUpdateDTO(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class AuthResult(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User


class RegisterUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, dto: RegisterDTO) -> AuthResult:
        email = dto.email.strip().lower()
        async with self._uow() as uow:
            if await uow.users.get_by_email(email):
                raise UserAlreadyExistsError(email)

            now = datetime.now(timezone.utc)
            user = User(
                id=str(uuid.uuid4()),
                email=email,
                # Хэш считается явно, до вставки
                password_hash=hash_password(dto.password),
                first_name=dto.first_name.strip(),
                last_name=dto.last_name.strip(),
                role=UserRole.CUSTOMER,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            await uow.users.create(user)
            await uow.commit()
            logger.info(f"Зарегистрирован пользователь {user.id}")

            return AuthResult(access_token=create_access_token(user), user=user)


class LoginUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, email: str, password: str) -> AuthResult:
        async with self._uow() as uow:
            user = await uow.users.get_by_email(email.strip())
            if not user or not verify_password(password, user.password_hash):
                logger.info(f"Неудачная попытка входа: {email}")
                raise AuthenticationError("Неверный email или пароль")
            if not user.is_active:
                raise AuthenticationError("Учетная запись отключена")

            now = datetime.now(timezone.utc)
            await uow.users.update(user.id, last_login_at=now)
            await uow.commit()

            user = user.model_copy(update={"last_login_at": now})
            return AuthResult(access_token=create_access_token(user), user=user)


class AuthenticateUseCase:
    """Токен → Principal; пользователь должен существовать и быть активным"""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, token: str) -> Principal:
        principal = decode_access_token(token)
        async with self._uow() as uow:
            user = await uow.users.get_by_id(principal.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Пользователь не найден или отключен")
        # Роль берется из базы, а не из токена
        return Principal(user_id=user.id, role=user.role)


class GetProfileUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str) -> User:
        async with self._uow() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user:
                raise AuthenticationError("Пользователь не найден")
            return user


class UpdateProfileUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, dto: ProfileUpdateDTO) -> User:
        async with self._uow() as uow:
            values = {key: value.strip() for key, value in dto.model_dump(exclude_none=True).items()}
            if values:
                await uow.users.update(user_id, **values)
                await uow.commit()
            return await uow.users.get_by_id(user_id)


class ChangePasswordUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, current_password: str, new_password: str) -> None:
        async with self._uow() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user or not verify_password(current_password, user.password_hash):
                raise ValidationError("Текущий пароль указан неверно")

            await uow.users.update(user_id, password_hash=hash_password(new_password))
            await uow.commit()
            logger.info(f"Пользователь {user_id} сменил пароль")
