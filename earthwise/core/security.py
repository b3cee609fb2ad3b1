from jose import JWTError, jwt
from earthwise.config import settings
from earthwise.core.exceptions import UnauthorizedException


def decode_id_token(token: str) -> dict:
    """
    Decode and validate an ID token issued by the wallet login provider.

    Args:
        token: ID token from Authorization header or the identity provider

    Returns:
        Decoded token payload with 'sub', 'exp' and optional 'email'/'name'

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

        # Validate expiration (jose checks this automatically)
        exp = payload.get("exp")
        if exp is None:
            raise UnauthorizedException("Token missing expiration")

        if payload.get("sub") is None:
            raise UnauthorizedException("Token missing user identifier")

        return payload

    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")


def extract_email(token: str) -> tuple[str, str | None]:
    """Extract (email, name) from an ID token; the API requires an email claim"""
    payload = decode_id_token(token)
    email = payload.get("email")
    if not email:
        raise UnauthorizedException("Token missing email claim")
    return email, payload.get("name")
