# scripts/create_professional.py
import logging

from anamnese_api.infra.db import SessionLocal
from anamnese_api.init_db import ensure_professional, main as create_tables

logging.basicConfig(level=logging.INFO)

create_tables()
db = SessionLocal()
try:
    professional = ensure_professional(db)
finally:
    db.close()

if professional:
    logging.getLogger(__name__).info("Profissional %s pronto", professional.email)
