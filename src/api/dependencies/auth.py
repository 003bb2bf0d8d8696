"""Authentication dependencies.

CurrentUser accepts any valid bearer token; StoreManager further
requires the STORE_MANAGER role claim.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.api.services.jwt_service import (
    JWTService,
    TokenExpiredError,
    TokenPayload,
    TokenError,
    get_jwt_service,
)

bearer_scheme = HTTPBearer(
    scheme_name="JWT",
    description="Token returned by POST /api/v1/auth/token",
)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
) -> TokenPayload:
    """Verify the bearer token.

    Raises:
        HTTPException: 401 if the token is expired or invalid.
    """
    try:
        return jwt_service.decode_token(credentials.credentials)
    except TokenExpiredError:
        raise _unauthorized("Token has expired") from None
    except TokenError:
        raise _unauthorized("Invalid authentication token") from None


CurrentUser = Annotated[TokenPayload, Depends(get_current_user)]


def require_store_manager(user: CurrentUser) -> TokenPayload:
    """Reject users without the store manager role.

    Raises:
        HTTPException: 403 for any other role.
    """
    if not user.is_store_manager:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Store manager role required",
        )
    return user


StoreManager = Annotated[TokenPayload, Depends(require_store_manager)]
