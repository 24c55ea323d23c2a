from fastapi import Depends

from anamnese_api.infra.db import get_db

DBSession = Depends(get_db)
