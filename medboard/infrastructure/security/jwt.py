"""JWT token creation and verification for authentication.

Access and refresh tokens are signed with separate secrets so a leaked access
key cannot mint refresh tokens. Expiry is checked against the injected clock
rather than the wall clock, which keeps token windows testable.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING, Any, cast

from jose import JWTError, jwt

from medboard.application.dtos.auth import AccessTokenClaims, RefreshTokenClaims
from medboard.core.config import AuthConfig
from medboard.domain.exceptions import InvalidTokenException
from medboard.shared.utils.datetime import Clock, ensure_utc, from_timestamp_utc, utc_now
from medboard.shared.utils.generators import generate_token_id

if TYPE_CHECKING:
    from medboard.application.dtos.auth import RefreshTokenRecord
    from medboard.application.interfaces.repositories import IRefreshTokenLedger
    from medboard.core.config import Settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class TokenCodec:
    """Mints, decodes and hashes access/refresh tokens (implements ITokenCodec)."""

    def __init__(
        self,
        secret_key: str,
        refresh_secret_key: str,
        token_hash_key: str,
        config: AuthConfig,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        if not secret_key or not refresh_secret_key:
            raise ValueError("Both signing secrets are required")
        self._secret_key = secret_key
        self._refresh_secret_key = refresh_secret_key
        self._token_hash_key = token_hash_key.encode("utf-8")
        self._config = config
        self._algorithm = algorithm
        self._clock = clock

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Clock = utc_now
    ) -> TokenCodec:
        return cls(
            secret_key=settings.secret_key.get_secret_value(),
            refresh_secret_key=settings.refresh_secret_key.get_secret_value(),
            token_hash_key=settings.get_token_hash_secret(),
            config=AuthConfig.from_settings(settings),
            algorithm=settings.algorithm,
            clock=clock,
        )

    # ---- minting ----------------------------------------------------------------

    def mint_access_token(self, claims: AccessTokenClaims) -> str:
        """Create a signed access token.

        Args:
            claims: User id, role and the active/approved flags at mint time.

        Returns:
            Encoded JWT string.
        """
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": claims.user_id,
            "role": claims.role,
            "is_approved": claims.is_approved,
            "is_active": claims.is_active,
            "type": ACCESS_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int((now + self._config.access_token_ttl).timestamp()),
        }
        return self._encode(payload, self._secret_key)

    def mint_refresh_token(self, user_id: str) -> str:
        """Create a signed refresh token carrying only the user id and a random jti."""
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": user_id,
            "jti": generate_token_id(),
            "type": REFRESH_TOKEN_TYPE,
            "iat": int(now.timestamp()),
            "exp": int((now + self._config.refresh_token_ttl).timestamp()),
        }
        return self._encode(payload, self._refresh_secret_key)

    # ---- decoding ---------------------------------------------------------------

    def decode_access_token(self, token: str) -> AccessTokenClaims:
        """Verify signature, expiry and type of an access token.

        Raises:
            InvalidTokenException: If the token is malformed, forged, expired or
                not an access token.
        """
        payload = self._decode(token, self._secret_key, ACCESS_TOKEN_TYPE)
        try:
            return AccessTokenClaims(
                user_id=str(payload["sub"]),
                role=str(payload["role"]),
                is_approved=bool(payload["is_approved"]),
                is_active=bool(payload["is_active"]),
            )
        except KeyError as e:
            raise InvalidTokenException() from e

    def decode_refresh_token(self, token: str) -> RefreshTokenClaims:
        """Verify signature, expiry and type of a refresh token.

        Raises:
            InvalidTokenException: If the token is malformed, forged, expired or
                not a refresh token.
        """
        payload = self._decode(token, self._refresh_secret_key, REFRESH_TOKEN_TYPE)
        return RefreshTokenClaims(
            user_id=str(payload["sub"]),
            token_id=str(payload.get("jti", "")),
            expires_at=from_timestamp_utc(float(payload["exp"])),
        )

    def hash_token(self, token: str) -> str:
        """Return the HMAC-SHA256 hex digest of token (deterministic for a given key)."""
        return hmac.new(
            self._token_hash_key, token.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    async def verify_refresh_token_record(
        self, token: str, ledger: IRefreshTokenLedger
    ) -> RefreshTokenRecord:
        """Verify a raw refresh token and return its live ledger record.

        The JWT signature and expiry are checked first, then the ledger is looked
        up by hash. A record that is missing, belongs to another user, or has
        passed its expiry is rejected.

        Raises:
            InvalidTokenException: On any verification failure.
        """
        claims = self.decode_refresh_token(token)
        token_hash = self.hash_token(token)
        record = await ledger.find_by_hash(token_hash)
        if record is None:
            raise InvalidTokenException()
        if not hmac.compare_digest(record.token_hash, token_hash):
            raise InvalidTokenException()
        if record.user_id != claims.user_id:
            raise InvalidTokenException()
        expires_at = ensure_utc(record.expires_at)
        if expires_at is None or expires_at <= self._clock():
            raise InvalidTokenException()
        return record

    # ---- internals --------------------------------------------------------------

    def _encode(self, payload: dict[str, Any], key: str) -> str:
        return cast(str, jwt.encode(payload, key, algorithm=self._algorithm))

    def _decode(self, token: str, key: str, expected_type: str) -> dict[str, Any]:
        if not token:
            raise InvalidTokenException()
        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[self._algorithm],
                options={
                    # jose turns verify_exp back on for required claims; exp is
                    # checked below against the injected clock.
                    "verify_exp": False,
                    "require_exp": False,
                    "require_sub": True,
                },
            )
        except JWTError as e:
            raise InvalidTokenException() from e
        if payload.get("type") != expected_type:
            raise InvalidTokenException()
        try:
            exp = float(payload["exp"])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenException() from e
        if from_timestamp_utc(exp) <= self._clock():
            raise InvalidTokenException()
        return cast(dict[str, Any], payload)
