import logging
from typing import Optional
from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.application.auth import AuthenticateUseCase
from storefront.application.basket import BasketOwner
from storefront.database import get_session_factory
from storefront.domain.exceptions import AuthenticationError, PermissionDeniedError
from storefront.domain.models import Principal
from storefront.infrastructure.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_uow(session_factory=Depends(get_session_factory)) -> UnitOfWork:
    return UnitOfWork(session_factory)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    uow: UnitOfWork = Depends(get_uow),
) -> Principal:
    """Principal запроса из заголовка Authorization; без токена 401"""
    if not credentials:
        raise AuthenticationError("Требуется токен доступа")
    return await AuthenticateUseCase(uow)(credentials.credentials)


async def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    uow: UnitOfWork = Depends(get_uow),
) -> Optional[Principal]:
    if not credentials:
        return None
    try:
        return await AuthenticateUseCase(uow)(credentials.credentials)
    except AuthenticationError as e:
        # Для анонимной корзины невалидный токен не ошибка, работаем по X-Session-ID
        logger.info(f"Токен проигнорирован: {e}")
        return None


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise PermissionDeniedError("Требуются права администратора")
    return principal


async def get_basket_owner(
    principal: Optional[Principal] = Depends(get_optional_principal),
    x_session_id: Optional[str] = Header(default=None),
) -> BasketOwner:
    return BasketOwner(user_id=principal.user_id if principal else None, session_id=x_session_id)


def provide(use_case_cls):
    """Фабрика use case поверх UnitOfWork запроса"""
    def factory(uow: UnitOfWork = Depends(get_uow)):
        return use_case_cls(uow)
    return factory
