from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from celltech.database import get_db
from celltech.models.user import User
from celltech.services.auth_service import decode_access_token
from celltech.services.statistics_service import MAX_WINDOW_DAYS, WindowParams
from celltech.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the caller from an ``Authorization: Bearer <token>`` header.

    - No bearer token: 401
    - Invalid/expired token, or a token for an unknown account: 403
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized User",
            headers={"WWW-Authenticate": "Bearer"}
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden Access")

    user = UserService(db).get_by_email(payload.get("email"))
    if not user:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden Access")

    return user


def get_window_params(
    days: Optional[float] = Query(
        None,
        le=MAX_WINDOW_DAYS,
        allow_inf_nan=False,
        description="Trailing number of days"
    ),
    current_year: Optional[float] = Query(None, alias="currentYear", description="Window from January 1st when > 0"),
    current_month: Optional[float] = Query(None, alias="currentMonth", description="Window from the 1st of this month when > 0"),
    current_week: Optional[float] = Query(None, alias="currentWeek", description="Window from Sunday when > 0"),
    user_id: Optional[str] = Query(None, alias="userId", description="Only sales made by this seller")
) -> WindowParams:
    """Collect the window query parameters shared by sales listing and statistics."""
    return WindowParams(
        days=days,
        current_year=current_year,
        current_month=current_month,
        current_week=current_week,
        user_id=user_id
    )
