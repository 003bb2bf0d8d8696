"""Token endpoint for the demo accounts."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.schemas import TokenRequest, TokenResponse
from src.api.services.jwt_service import JWTService, authenticate, get_jwt_service
from src.etl.utils.logger import setup_logger

logger = setup_logger("api.routers.auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/token",
    response_model=TokenResponse,
    summary="Get access token",
    description="Exchange demo-account credentials for a JWT carrying the account role.",
)
def issue_token(
    credentials: TokenRequest,
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
) -> TokenResponse:
    """Authenticate a demo account.

    Raises:
        HTTPException: 401 if the credentials are wrong.
    """
    role = authenticate(credentials.username, credentials.password)
    if role is None:
        logger.info(f"Rejected login for {credentials.username}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenResponse(
        access_token=jwt_service.create_token(credentials.username, role),
        expires_in=jwt_service.expire_seconds,
        role=role.value,
    )
