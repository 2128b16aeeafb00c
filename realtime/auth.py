import logging
import urllib.parse
from typing import Optional

from channels.middleware import BaseMiddleware
from django.conf import settings
from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError

log = logging.getLogger(__name__)


def _strip_bearer(value: str) -> str:
    value = value.strip()
    return value[7:].strip() if value.lower().startswith("bearer ") else value


class JWTAuthMiddleware(BaseMiddleware):
    # QueryString ?token=..., scope["subprotocols"], Sec-WebSocket-Protocol 또는 Authorization 헤더에서 JWT를 추출해 검증 후 scope["user_id"]를 세팅한다.

    def _extract_token(self, scope) -> Optional[str]:
        # 1) QueryString
        qs = scope.get("query_string", b"").decode()
        if qs:
            params = urllib.parse.parse_qs(qs)
            if params.get("token"):
                return params["token"][0]

        # 2) ASGI scope subprotocols (브라우저는 헤더를 못 붙이므로 주로 이 경로)
        for proto in scope.get("subprotocols") or []:
            if proto and proto.strip():
                return _strip_bearer(proto)

        headers = dict(scope.get("headers", []))

        # 3) Sec-WebSocket-Protocol 헤더 (ASGI 서버에 따라 들어올 수 있음)
        swp = headers.get(b"sec-websocket-protocol")
        if swp:
            return _strip_bearer(swp.decode().split(",")[0])

        # 4) Authorization: Bearer <token> (네이티브 클라이언트)
        auth = headers.get(b"authorization")
        if auth:
            return _strip_bearer(auth.decode())

        return None

    def _decode(self, token: str) -> Optional[str]:
        backend = TokenBackend(
            algorithm=settings.SIMPLE_JWT.get("ALGORITHM", "HS256"),
            signing_key=settings.SIMPLE_JWT.get("SIGNING_KEY", settings.SECRET_KEY),
            verifying_key=settings.SIMPLE_JWT.get("VERIFYING_KEY", None),
        )
        try:
            payload = backend.decode(token, verify=True)
        except TokenBackendError:
            log.info("Rejected websocket token")
            return None
        claim = settings.SIMPLE_JWT.get("USER_ID_CLAIM", "user_id")
        user_id = payload.get(claim) or payload.get("sub")
        return str(user_id) if user_id else None

    async def __call__(self, scope, receive, send):
        token = self._extract_token(scope)
        scope["user_id"] = self._decode(token) if token else None
        return await super().__call__(scope, receive, send)
