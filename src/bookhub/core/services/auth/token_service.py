"""Bearer access tokens.

Tokens are issued outside this service (an identity provider, or the dev CLI
for local work). The API only verifies them: an HS256 JWT signed with
``app.session_signing_secret`` whose ``sub`` claim is the user id.
"""

import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, JsonWebToken
from loguru import logger

from src.bookhub.core.errors import AuthenticationError
from src.bookhub.runtime.config.config_data import ConfigData
from src.bookhub.runtime.context import get_config


class AccessTokenService:
    """Generate and verify signed access tokens."""

    def __init__(self, config: ConfigData | None = None):
        cfg = config or get_config()
        self._secret = cfg.app.session_signing_secret
        self._issuer = cfg.jwt.gen_issuer
        self._clock_skew = cfg.jwt.clock_skew
        self._default_ttl = cfg.jwt.access_token_ttl_seconds
        self._algorithms = list(cfg.jwt.allowed_algorithms)
        self._jwt = JsonWebToken(self._algorithms)

    def _require_secret(self) -> str:
        if not self._secret:
            logger.error("JWT signing secret not configured")
            raise AuthenticationError("Authentication is not configured")
        return self._secret

    def generate_access_token(
        self,
        user_id: str,
        *,
        expires_in_seconds: int | None = None,
        claims: dict[str, Any] | None = None,
    ) -> str:
        """Sign a token for ``user_id``.

        Args:
            user_id: Subject (sub) claim
            expires_in_seconds: Token lifetime, defaults to ``jwt.access_token_ttl_seconds``
            claims: Extra claims; registered claims in here are ignored

        Returns:
            Encoded JWT string
        """
        now = int(time.time())
        ttl = self._default_ttl if expires_in_seconds is None else expires_in_seconds
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "sub": user_id,
            "iat": now,
            "nbf": now,
            "exp": now + ttl,
            "jti": generate_token(16),
        }
        if claims:
            payload.update(
                {
                    k: v
                    for k, v in claims.items()
                    if k not in {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}
                }
            )

        header = {"alg": self._algorithms[0], "typ": "JWT"}
        token = self._jwt.encode(header, payload, self._require_secret())
        return token.decode() if isinstance(token, bytes) else token

    def verify_access_token(self, token: str) -> str:
        """Return the subject of a valid token, or raise AuthenticationError."""
        secret = self._require_secret()
        claims_options = {
            "iss": {"essential": True, "value": self._issuer},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = self._jwt.decode(token, secret, claims_options=claims_options)
            claims.validate(leeway=self._clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("Rejected bearer token: {}", exc)
            raise AuthenticationError("Not authorized, token failed") from exc

        return str(claims["sub"])
