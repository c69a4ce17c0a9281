# intervium/services/identifiers.py
import re

from intervium.errors import InvalidIdentifier

# 토큰 sub (uuid, auth0 "provider|id" 등) 허용 문자
_USER_ID_RE = re.compile(r"^[A-Za-z0-9_.:@|\-]{1,64}$")

# BigInteger PK 범위
MAX_ATTEMPT_ID = 2**63 - 1


def ensure_user_id(value) -> str:
    user_id = str(value or "").strip()
    if not _USER_ID_RE.match(user_id):
        raise InvalidIdentifier("invalid_user_id", detail={"userId": str(value)})
    return user_id


def ensure_attempt_id(value) -> int:
    try:
        attempt_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidIdentifier("invalid_interview_id", detail={"id": str(value)})
    if not 0 < attempt_id <= MAX_ATTEMPT_ID:
        raise InvalidIdentifier("invalid_interview_id", detail={"id": str(value)})
    return attempt_id
