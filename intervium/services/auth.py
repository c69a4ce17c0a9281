# intervium/services/auth.py
# 토큰 발급은 외부 인증 서비스 담당. 여기서는 Bearer JWT 검증만 한다.
import logging
from typing import Dict

from jose import ExpiredSignatureError, JWTError, jwt

from intervium.config import settings
from intervium.errors import Unauthorized

logger = logging.getLogger(__name__)


def _decode(token: str) -> Dict:
    options = {"verify_aud": bool(settings.jwt_audience)}
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        options=options,
    )


async def verify_bearer(authorization: str | None) -> Dict[str, str | None]:
    if not authorization:
        raise Unauthorized("login_required", detail="missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthorized("login_required", detail="invalid Authorization header")

    token = parts[1].strip()
    if not token:
        raise Unauthorized("login_required", detail="invalid Authorization header")

    try:
        claims = _decode(token)
    except ExpiredSignatureError as e:
        raise Unauthorized("token_expired") from e
    except JWTError as e:
        logger.warning("[AUTH] JWT decode failed: %s", e)
        raise Unauthorized("invalid_token") from e

    user_id = claims.get("sub")
    if not user_id:
        raise Unauthorized("invalid_token", detail="missing sub")

    return {
        "user_id": str(user_id),
        "email": claims.get("email"),
    }
