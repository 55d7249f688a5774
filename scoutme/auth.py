"""
Identity Verification
=====================

Callers authenticate with a Firebase ID token in the ``Authorization: Bearer``
header. Tokens are RS256 JWTs signed by Google's ``securetoken`` service
account; we verify signature, audience, issuer and expiry with PyJWT and trust
the ``sub`` claim as the caller's uid.
"""

import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient
from jwt.exceptions import PyJWKClientConnectionError, PyJWKClientError
from starlette.concurrency import run_in_threadpool

from scoutme.exceptions import UpstreamError

logger = logging.getLogger(__name__)

GOOGLE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)

bearer_scheme = HTTPBearer(auto_error=False, description="Firebase ID token")


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens for one project."""

    def __init__(self, project_id: str, jwks_url: str = GOOGLE_JWKS_URL) -> None:
        self.project_id = project_id
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self._jwks_client = PyJWKClient(jwks_url, cache_keys=True)

    def verify(self, token: str) -> str:
        """
        Return the uid carried by ``token``.

        Raises ``jwt.InvalidTokenError`` for bad or expired tokens and
        ``UpstreamError`` when Google's key set cannot be fetched. Blocking;
        call from a threadpool.
        """
        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
        except PyJWKClientConnectionError as e:
            logger.error(f"Could not fetch signing keys: {e}")
            raise UpstreamError("Identity provider unavailable") from e
        except PyJWKClientError as e:
            raise jwt.InvalidTokenError(str(e)) from e

        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=self.project_id,
            issuer=self.issuer,
            options={"require": ["exp", "iat", "sub"]},
        )
        uid = claims.get("sub")
        if not uid:
            raise jwt.InvalidTokenError("Token has no subject")
        return uid


async def get_current_uid(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Resolve the caller's uid from the bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    verifier = request.app.state.token_verifier
    try:
        uid = await run_in_threadpool(verifier.verify, credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Picked up by the access log
    request.state.uid = uid
    return uid
