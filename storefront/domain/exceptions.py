class DomainException(Exception):
    pass


class ValidationError(DomainException):
    pass


class NotFoundError(DomainException):
    pass


class ConflictError(DomainException):
    pass


class AuthenticationError(DomainException):
    pass


class PermissionDeniedError(DomainException):
    pass


class ItemNotFoundError(NotFoundError):
    pass


class BasketItemNotFoundError(NotFoundError):
    pass


class OrderNotFoundError(NotFoundError):
    pass


class ReviewNotFoundError(NotFoundError):
    pass


class WishlistItemNotFoundError(NotFoundError):
    pass


class BrandOrTypeNotFoundError(NotFoundError):
    pass


class BasketOwnerRequiredError(ValidationError):
    def __init__(self):
        super().__init__("Требуется авторизация или заголовок X-Session-ID")


class EmptyBasketError(ValidationError):
    def __init__(self):
        super().__init__("Корзина пуста")


class ProductUnavailableError(ValidationError):
    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f"Товар {product_name} больше недоступен")


class InsufficientStockError(ValidationError):
    def __init__(self, product_name: str, available: int, required: int):
        self.product_name = product_name
        self.available = available
        self.required = required
        super().__init__(
            f"Недостаточно товара {product_name}. Доступно: {available}, требуется: {required}"
        )


class OrderNotCancellableError(ConflictError):
    def __init__(self, status):
        self.status = status
        super().__init__(f"Отменить можно только заказ в статусе pending (текущий: {status.value})")


class InvalidStatusTransitionError(ConflictError):
    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Недопустимый переход статуса: {current.value} -> {requested.value}")


class AlreadyReviewedError(ConflictError):
    def __init__(self):
        super().__init__("Вы уже оставили отзыв на этот товар")


class AlreadyInWishlistError(ConflictError):
    def __init__(self):
        super().__init__("Товар уже в избранном")


class UserAlreadyExistsError(ConflictError):
    def __init__(self, email: str):
        super().__init__(f"Пользователь {email} уже зарегистрирован")


class CatalogEntryExistsError(ConflictError):
    def __init__(self, name: str):
        super().__init__(f"{name} уже существует")
