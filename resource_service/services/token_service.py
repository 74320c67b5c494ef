# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: signed bearer credentials (JWT).
Verification is a pure check — no store access.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from resource_service.core.errors import InvalidTokenError
from resource_service.models.domain import Caller, Role


class TokenService:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl_hours: int = 24):
        if not secret:
            raise ValueError("JWT signing secret is not configured (set JWT_KEY)")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(hours=ttl_hours)

    def issue(self, user: Dict[str, Any]) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "id": user["id"],
            "email": user["email"],
            "userRole": user["role"],
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Caller:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "id", "userRole"]},
            )
        except jwt.PyJWTError:
            raise InvalidTokenError()

        try:
            role = Role(payload["userRole"])
        except ValueError:
            raise InvalidTokenError()
        user_id = payload["id"]
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()
        return Caller(user_id=user_id, email=str(payload.get("email", "")), role=role)
