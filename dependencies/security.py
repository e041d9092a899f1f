from typing import Optional, Annotated
from fastapi import Depends, Header

from services.errors import Unauthorized
from services.grade_reports import now_ms
from services.identity import Identity, get_identity_verifier

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]


def parse_bearer(authorization: Optional[str]) -> str:
    """Extrai o token de "Bearer <token>"; qualquer outro formato é 401."""
    if not authorization:
        raise Unauthorized("Cabeçalho Authorization ausente")

    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise Unauthorized("Cabeçalho Authorization inválido")

    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Esquema de autenticação inválido")

    return token.strip()


def require_identity(
    authorization: AuthHeader = None,
    verifier=Depends(get_identity_verifier),
) -> Identity:
    token = parse_bearer(authorization)
    return verifier.verify(token)


def get_clock():
    # substituível nos testes via app.dependency_overrides
    return now_ms
