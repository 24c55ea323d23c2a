from __future__ import annotations

import logging
import os
from typing import Optional

from sqlalchemy.orm import Session

from anamnese_api.infra.db import engine
from anamnese_api.infra.models import Base, ProfessionalORM
from anamnese_api.services.errors import ConflictError, ValidationError
from anamnese_api.services.professional_service import create_professional, get_by_email

logger = logging.getLogger(__name__)


def main():
    Base.metadata.create_all(bind=engine)
    logger.info("Tabelas criadas!")


def ensure_professional(db: Session) -> Optional[ProfessionalORM]:
    """
    Cria um profissional inicial caso não exista.
    Configure via variáveis de ambiente:
      PROFESSIONAL_EMAIL, PROFESSIONAL_PASSWORD, PROFESSIONAL_NAME
    """
    email = os.getenv("PROFESSIONAL_EMAIL", "").strip().lower()
    password = os.getenv("PROFESSIONAL_PASSWORD", "").strip()
    name = os.getenv("PROFESSIONAL_NAME", "Profissional").strip()

    if not email or not password:
        logger.info("[init_db] PROFESSIONAL_EMAIL/PROFESSIONAL_PASSWORD ausentes; nada a fazer")
        return None

    existing = get_by_email(db, email)
    if existing:
        return existing

    try:
        return create_professional(db, nome=name, email=email, senha=password)
    except ConflictError:
        # corrida com outra instância subindo
        return get_by_email(db, email)
    except ValidationError as e:
        logger.warning("[init_db] profissional inicial inválido: %s", e.message)
        return None


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
