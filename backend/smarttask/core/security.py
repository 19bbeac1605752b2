from jose import jwt

from .config import Settings


def decode_session_token(token: str, settings: Settings) -> dict:
    """Verify a provider-issued session token and return its claims.

    Raises ``jose.JWTError`` (or ``ValueError`` when no key is configured).
    """
    if not settings.session_jwt_key:
        raise ValueError("SESSION_JWT_KEY is not configured")

    kwargs = {}
    if settings.session_jwt_issuer:
        kwargs["issuer"] = settings.session_jwt_issuer

    return jwt.decode(
        token,
        settings.session_jwt_key,
        algorithms=settings.session_jwt_algorithms,
        options={"verify_aud": False},
        **kwargs,
    )
