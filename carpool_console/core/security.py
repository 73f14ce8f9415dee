from jose import JWTError, jwt
from carpool_console.config import settings
from carpool_console.core.exceptions import UnauthorizedException


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using shared SECRET_KEY.

    The console never issues tokens; it only checks that the token the
    browser presents is well formed and unexpired before forwarding it
    to the platform API.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (user_id), 'exp', etc.

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])

        # jose checks expiry, but only when the claim is present
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        user_id: str = payload.get("sub")
        if user_id is None:
            raise UnauthorizedException("Token missing user identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def extract_user_id(token: str) -> str:
    """Extract the platform user id from JWT token"""
    payload = decode_jwt(token)
    return payload["sub"]


class TokenStore:
    """
    Holder for the client's bearer token.

    The API client reads the token before every request, so replacing or
    clearing it takes effect on the next call.
    """

    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    def __bool__(self) -> bool:
        return self._token is not None
