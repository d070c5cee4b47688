from .database import DATABASE_URL, Base, init_db, make_engine
from .models import OfficeDB, CrowdReportDB

__all__ = [
    "DATABASE_URL", "Base", "init_db", "make_engine",
    "OfficeDB", "CrowdReportDB"
]
