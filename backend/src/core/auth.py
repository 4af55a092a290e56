"""
Authentication against the external identity provider.

Access tokens are RS256 JWTs issued by an Auth0-style provider. Signing keys are
fetched from the provider's JWKS endpoint. Every authenticated request refreshes
the caller's user row so blog foreign keys always resolve.
"""
import logging
from functools import lru_cache
from typing import Any

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings
from models.user import User
from schemas.user import UserUpsert
from services.storage import BlogStorage, get_storage


logger = logging.getLogger(__name__)

DEV_USER_CLAIMS: dict[str, Any] = {
    "sub": "dev-user",
    "email": "dev@localhost",
    "given_name": "Dev",
    "family_name": "User",
}

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwks_client(jwks_url: str) -> jwt.PyJWKClient:
    """One JWKS client per URL so signing keys are cached between requests."""
    return jwt.PyJWKClient(jwks_url)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Verify an access token and return its claims.

    Raises:
        jwt.PyJWTError: If the signature, audience, issuer or expiry check fails,
            or the signing key cannot be fetched.
    """
    signing_key = get_jwks_client(settings.auth0_jwks_url).get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        audience=settings.auth0_audience,
        issuer=settings.auth0_issuer,
        options={"require": ["sub"]},
    )


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    Return the verified claims of the caller's bearer token.

    In dev mode the token is not checked and a fixed development identity is used.
    """
    if settings.dev_mode:
        return DEV_USER_CLAIMS
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        return decode_access_token(credentials.credentials, settings)
    except jwt.PyJWTError as e:
        logger.warning("token_rejected", extra={"reason": str(e)})
        raise _unauthorized("Invalid authentication credentials") from e


def user_upsert_from_claims(claims: dict[str, Any], *, first_seen: bool) -> UserUpsert:
    """
    Build the sync payload for the caller.

    Profile fields are only copied from the token the first time a user is seen;
    afterwards they belong to the user and are edited through the profile endpoint.
    """
    data: dict[str, Any] = {"id": claims["sub"]}
    if claims.get("email"):
        data["email"] = claims["email"]
    if first_seen:
        profile = {
            "first_name": claims.get("given_name"),
            "last_name": claims.get("family_name"),
            "profile_image_url": claims.get("picture"),
        }
        data.update({key: value for key, value in profile.items() if value})
    return UserUpsert(**data)


async def get_current_user(
    claims: dict[str, Any] = Depends(get_token_claims),
    storage: BlogStorage = Depends(get_storage),
) -> User:
    """Authenticate the caller and upsert their user row."""
    existing = await storage.get_user(claims["sub"])
    return await storage.upsert_user(
        user_upsert_from_claims(claims, first_seen=existing is None),
    )
