"""FastAPI dependencies: get_current_principal, require_admin.

Usage in any protected router:
    from src.ec_gateway.auth.dependencies import get_current_principal

    @router.get("/protected")
    async def protected(principal: Principal = Depends(get_current_principal)):
        ...

The principal is built from token claims alone. Resolving the username to a
user row is the job of the service that needs it (OrderService raises
UserNotFoundError when the identity does not resolve).
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.ec_common.enums import UserRole
from src.ec_common.errors import AdminRequiredError, InvalidCredentialsError
from src.ec_gateway.auth.jwt_handler import decode_token
from src.ec_gateway.auth.principal import Principal

# tokenUrl points at the external auth service (used by Swagger's "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    """Validate the Bearer token and return the caller's identity and role.

    Raises HTTP 401 if the token is missing, invalid, expired, or lacks a
    usable subject/role.
    """
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    username = payload.get("sub")
    if not username:
        raise _CREDENTIALS_EXCEPTION

    try:
        role = UserRole(payload.get("role", UserRole.USER.value))
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    return Principal(username=username, role=role)


async def require_admin(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    """Gate privileged order endpoints (status changes, deletion, global listings).

    Raises HTTP 403 (AdminRequiredError) for non-admin callers.
    """
    if not principal.is_admin:
        raise AdminRequiredError()
    return principal
