from fastapi import APIRouter, Depends, status

from storefront.application.auth import (
    RegisterUseCase, LoginUseCase, GetProfileUseCase, UpdateProfileUseCase, ChangePasswordUseCase,
    RegisterDTO, ProfileUpdateDTO,
)
from storefront.domain.models import Principal
from storefront.presentation.dependencies import get_current_principal, provide
from storefront.presentation.schemas import (
    RegisterRequest, LoginRequest, UpdateProfileRequest, ChangePasswordRequest,
    TokenResponse, UserResponse, ErrorResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def register(
    request: RegisterRequest,
    use_case: RegisterUseCase = Depends(provide(RegisterUseCase)),
):
    """Регистрация покупателя"""
    result = await use_case(RegisterDTO(**request.model_dump()))
    return TokenResponse.from_domain(result)


@router.post("/login", response_model=TokenResponse, responses={401: {"model": ErrorResponse}})
async def login(
    request: LoginRequest,
    use_case: LoginUseCase = Depends(provide(LoginUseCase)),
):
    result = await use_case(request.email, request.password)
    return TokenResponse.from_domain(result)


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    principal: Principal = Depends(get_current_principal),
    use_case: GetProfileUseCase = Depends(provide(GetProfileUseCase)),
):
    return UserResponse.from_domain(await use_case(principal.user_id))


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    request: UpdateProfileRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: UpdateProfileUseCase = Depends(provide(UpdateProfileUseCase)),
):
    user = await use_case(principal.user_id, ProfileUpdateDTO(**request.model_dump()))
    return UserResponse.from_domain(user)


@router.put("/change-password", status_code=status.HTTP_204_NO_CONTENT, responses={400: {"model": ErrorResponse}})
async def change_password(
    request: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    use_case: ChangePasswordUseCase = Depends(provide(ChangePasswordUseCase)),
):
    await use_case(principal.user_id, request.current_password, request.new_password)
