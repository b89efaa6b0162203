from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError
from resort.models.users import UserRole


@dataclass
class Caller:
    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_caller(event: dict) -> Optional[Caller]:
    """Caller identity placed on the request by the API Gateway authorizer."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    user_id = authorizer.get("user_id")
    if not user_id:
        return None
    try:
        role = UserRole((authorizer.get("role") or "user").lower())
    except ValueError:
        role = UserRole.USER
    return Caller(user_id=user_id, role=role)


def path_param(event: dict, name: str) -> Optional[str]:
    return (event.get("pathParameters") or {}).get(name)


def query_params(event: dict) -> dict:
    return event.get("queryStringParameters") or {}


def parse_query_datetime(value: str) -> datetime:
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_validation_error(err: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(map(str, e['loc']))}: {e['msg']}" if e["loc"] else e["msg"]
        for e in err.errors()
    )
