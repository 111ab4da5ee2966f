"""JWT validation for access tokens issued by the hosted identity service."""

import logging
import time
from dataclasses import dataclass, field

import jwt
from prometheus_client import Counter, Histogram

from fresh_grocery.config import Settings
from fresh_grocery.exceptions import AuthenticationException
from fresh_grocery.models.profile import AppRole

# Auth metrics
AUTH_VALIDATION_TOTAL = Counter(
    "auth_validation_total",
    "Total auth token validations by status",
    ["status"],
)
AUTH_VALIDATION_DURATION_SECONDS = Histogram(
    "auth_validation_duration_seconds",
    "Auth token validation duration in seconds",
)

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """Authentication context extracted from a validated JWT token."""

    subject: str  # JWT "sub" claim
    email: str | None  # JWT "email" claim
    name: str | None  # user_metadata.full_name, falling back to "name"
    roles: set[str] = field(default_factory=set)  # loaded from user_roles


class AuthService:
    """Validates HS256 access tokens shared-secret signed by the identity service.

    Tokens carry only identity. Roles are stored in the ``user_roles`` table
    and attached to the context by the request hook after the profile is
    ensured.
    """

    def __init__(self, config: Settings) -> None:
        self.config = config

    @property
    def configured_roles(self) -> set[str]:
        """Return the full set of valid role names for @allow_roles validation."""
        return {role.value for role in AppRole}

    def validate_token(self, token: str) -> AuthContext:
        """Validate a JWT and extract the caller's identity.

        Raises:
            AuthenticationException: If token is invalid, expired, or malformed
        """
        start_time = time.perf_counter()

        try:
            options = {"require": ["exp", "sub"]}
            if self.config.auth_jwt_audience is None:
                options["verify_aud"] = False  # type: ignore[assignment]

            payload = jwt.decode(
                token,
                self.config.auth_jwt_secret,
                algorithms=["HS256"],
                audience=self.config.auth_jwt_audience,
                issuer=self.config.auth_jwt_issuer,
                leeway=self.config.auth_clock_skew_seconds,
                options=options,
            )

            subject = payload.get("sub")
            if not subject:
                raise AuthenticationException("Token missing 'sub' claim")

            email = payload.get("email")
            metadata = payload.get("user_metadata") or {}
            name = metadata.get("full_name") or payload.get("name")

            duration = time.perf_counter() - start_time
            AUTH_VALIDATION_TOTAL.labels(status="success").inc()
            AUTH_VALIDATION_DURATION_SECONDS.observe(max(duration, 0.0))

            logger.debug("Token validated for subject=%s email=%s", subject, email)

            return AuthContext(subject=str(subject), email=email, name=name)

        except jwt.ExpiredSignatureError as e:
            self._record_failure("expired", start_time)
            logger.warning("Token validation failed: expired")
            raise AuthenticationException("Token has expired") from e

        except jwt.InvalidSignatureError as e:
            self._record_failure("invalid_signature", start_time)
            logger.warning("Token validation failed: invalid signature")
            raise AuthenticationException("Invalid token signature") from e

        except (jwt.InvalidIssuerError, jwt.InvalidAudienceError) as e:
            self._record_failure("invalid_claims", start_time)
            logger.warning("Token validation failed: invalid issuer or audience")
            raise AuthenticationException(
                "Token issuer or audience does not match expected values"
            ) from e

        except jwt.PyJWTError as e:
            self._record_failure("invalid_token", start_time)
            logger.warning("Token validation failed: %s", str(e))
            raise AuthenticationException(f"Invalid token: {str(e)}") from e

        except AuthenticationException:
            self._record_failure("error", start_time)
            raise

    def _record_failure(self, status: str, start_time: float) -> None:
        duration = time.perf_counter() - start_time
        AUTH_VALIDATION_TOTAL.labels(status=status).inc()
        AUTH_VALIDATION_DURATION_SECONDS.observe(max(duration, 0.0))
