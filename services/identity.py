"""
services/identity.py

- Verificação do ID token do Firebase Authentication (firebase-admin)
- Busca dos campos de perfil do aluno (nome, CPF, turma) que vão para o boletim
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict

import firebase_admin
from firebase_admin import auth, credentials, exceptions
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.settings import settings
from models.students import StudentProfile as StudentProfileModel
from services.errors import InternalError, Unauthorized

logger = logging.getLogger(__name__)

DEFAULT_STUDENT_NAME = "Aluno"


@dataclass
class Identity:
    uid: str
    claims: Dict[str, Any] = field(default_factory=dict)


@dataclass
class StudentProfile:
    name: str
    cpf: str = ""
    turma: str = ""


class FirebaseIdentityVerifier:
    """Valida ID tokens com o Admin SDK; o app é inicializado na primeira chamada."""

    def __init__(self, project_id: str = None, credentials_path: str = None, check_revoked: bool = False):
        self.project_id = project_id
        self.credentials_path = credentials_path
        self.check_revoked = check_revoked
        self._app = None
        self._lock = threading.Lock()

    def _get_app(self):
        with self._lock:
            if self._app is None:
                try:
                    cred = (
                        credentials.Certificate(self.credentials_path)
                        if self.credentials_path
                        else credentials.ApplicationDefault()
                    )
                    options = {"projectId": self.project_id} if self.project_id else None
                    self._app = firebase_admin.initialize_app(cred, options, name="edutok-reports")
                    logger.info("Firebase Admin SDK inicializado")
                except (ValueError, IOError, exceptions.FirebaseError) as e:
                    logger.error(f"Firebase Admin SDK não inicializado: {e}")
                    raise InternalError("Serviço de autenticação indisponível")
            return self._app

    def verify(self, token: str) -> Identity:
        # JWT: três segmentos não vazios; fora disso nem chega ao SDK
        if not isinstance(token, str) or not all(token.split(".")) or token.count(".") != 2:
            logger.warning("Token com formato inválido")
            raise Unauthorized()

        app = self._get_app()
        try:
            decoded = auth.verify_id_token(token, app=app, check_revoked=self.check_revoked)
        except (auth.InvalidIdTokenError, auth.UserDisabledError) as e:
            # inclui token expirado e revogado (subclasses de InvalidIdTokenError)
            logger.warning(f"Token inválido: {e}")
            raise Unauthorized()
        except (auth.CertificateFetchError, exceptions.FirebaseError, ValueError) as e:
            # ValueError aqui é configuração (ex: projeto não determinado), não token ruim
            logger.error(f"Falha ao verificar token: {e}")
            raise InternalError("Serviço de autenticação indisponível")

        uid = decoded.get("uid") or decoded.get("sub")
        if not uid:
            raise Unauthorized()
        logger.info(f"Token verificado para o usuário {uid}")
        return Identity(uid=uid, claims=decoded)


def lookup_profile(db: Session, identity: Identity) -> StudentProfile:
    """Campos de exibição do aluno; sem perfil cadastrado usa o nome do token ou "Aluno"."""
    try:
        row = db.get(StudentProfileModel, identity.uid)
    except SQLAlchemyError:
        logger.exception(f"Falha ao buscar perfil de {identity.uid}")
        raise InternalError("Erro ao criar relatório")

    fallback_name = identity.claims.get("name") or DEFAULT_STUDENT_NAME
    if row is None:
        return StudentProfile(name=fallback_name)
    return StudentProfile(
        name=row.display_name or fallback_name,
        cpf=row.cpf or "",
        turma=row.turma or "",
    )


_verifier = None
_verifier_lock = threading.Lock()


def get_identity_verifier() -> FirebaseIdentityVerifier:
    global _verifier
    with _verifier_lock:
        if _verifier is None:
            _verifier = FirebaseIdentityVerifier(
                project_id=settings.FIREBASE_PROJECT_ID,
                credentials_path=settings.FIREBASE_CREDENTIALS_PATH,
                check_revoked=settings.FIREBASE_CHECK_REVOKED,
            )
        return _verifier
