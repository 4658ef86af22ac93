"""
Bearer token authentication.

Tokens are a lightweight JSON Web Token: a header and a payload, both
base64url encoded, signed with HMAC-SHA256 using the configured secret.
The ``sub`` claim holds the agent id of the caller and ``exp`` the
expiry as a UNIX timestamp.  Issuing tokens is left to the identity
system (``create_token.py`` exists for local use); the service only
verifies them and checks that the agent still resolves.
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import settings
from .dependencies import get_resolver
from .errors import UnknownAgentError
from contact_service_api.app.identity.resolver import AgentProfile, IdentityResolver


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(agent_id: str, expires_delta: Optional[int] = None, secret: Optional[str] = None) -> str:
    """Create a signed token for ``agent_id``.

    Parameters
    ----------
    agent_id : str
        Identifier of the agent, stored as the ``sub`` claim.
    expires_delta : Optional[int]
        Lifetime of the token in seconds.  Defaults to
        ``settings.access_token_expire_minutes * 60``.
    secret : Optional[str]
        Signing key, defaults to ``settings.secret_key``.
    """
    exp_seconds = expires_delta or settings.access_token_expire_minutes * 60
    payload = {"sub": agent_id, "exp": int(time.time()) + exp_seconds}
    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret or settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Verify a token and return its payload, or ``None`` if it is malformed, forged or expired."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    try:
        actual_sig = _b64_url_decode(signature_b64)
        expected_sig = _sign(signing_input, secret or settings.secret_key)
        if not hmac.compare_digest(expected_sig, actual_sig):
            return None
        data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict) or not data.get("sub"):
        return None
    if data.get("exp") is None or int(data["exp"]) < int(time.time()):
        return None
    return data


security = HTTPBearer(auto_error=False)


def get_current_agent(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    resolver: IdentityResolver = Depends(get_resolver),
) -> AgentProfile:
    """Dependency returning the authenticated agent.

    Raises HTTP 401 when the ``Authorization`` header is missing, the
    token does not verify or its subject is no longer a known agent.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return resolver.resolve_profile(str(payload["sub"]))
    except UnknownAgentError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Agent no longer exists",
            headers={"WWW-Authenticate": "Bearer"},
        )
