from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from celltech.database import get_db
from celltech.schemas.common import ApiResponse
from celltech.schemas.user import LoginResponse, UserLogin, UserRegister, UserResponse
from celltech.services.errors import DuplicateError, InvalidCredentialsError
from celltech.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user"
)
def register(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Create an account. The password is stored as a bcrypt hash and every
    new account gets the ``user`` role.
    """
    service = UserService(db)

    try:
        user = service.register(user_data)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message="Registered successfully",
        content=UserResponse.model_validate(user)
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    summary="Log in and receive an access token"
)
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """Exchange email and password for a bearer token."""
    service = UserService(db)

    try:
        user, token = service.login(credentials.email, credentials.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message="Logged in successfully",
        content=LoginResponse(
            user_id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            token=token
        )
    )
