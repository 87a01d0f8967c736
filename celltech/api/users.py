from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from celltech.api.deps import get_current_user
from celltech.database import get_db
from celltech.schemas.common import ApiResponse
from celltech.schemas.user import UserResponse, UserUpdate
from celltech.services.errors import DuplicateError, UserNotFoundError
from celltech.services.user_service import UserService

router = APIRouter(tags=["Users"], dependencies=[Depends(get_current_user)])


@router.get(
    "/users",
    response_model=ApiResponse[List[UserResponse]],
    summary="List users"
)
def list_users(db: Session = Depends(get_db)):
    users = UserService(db).get_all()
    return ApiResponse(
        message="Data Found!",
        content=[UserResponse.model_validate(u) for u in users]
    )


@router.patch(
    "/user/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Update a user",
    description="Partial update of name, email, password, role or status."
)
def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db)
):
    service = UserService(db)

    try:
        user = service.update(user_id, user_data)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return ApiResponse(
        message="User Updated successfully!",
        content=UserResponse.model_validate(user)
    )
