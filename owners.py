from typing import Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer

from config import get_settings


def _serializer() -> URLSafeTimedSerializer:
    settings = get_settings()
    return URLSafeTimedSerializer(settings.owner_secret, salt="ledger-owner")


def issue_owner_token(owner_id: str) -> str:
    if not owner_id:
        raise ValueError("Owner id cannot be empty")
    return _serializer().dumps({"o": owner_id})


def read_owner_token(token: str) -> Optional[str]:
    settings = get_settings()
    try:
        data = _serializer().loads(
            token, max_age=settings.owner_token_max_age_hours * 3600
        )
    except BadSignature:
        return None

    owner_id = data.get("o") if isinstance(data, dict) else None
    if not isinstance(owner_id, str) or not owner_id:
        return None
    return owner_id
