from sqlalchemy import Column, String, Float, BigInteger, ForeignKey, Index
from .database import Base

class OfficeDB(Base):
    __tablename__ = "offices"

    office_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False, default="other")
    city = Column(String, nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String, nullable=True)

class CrowdReportDB(Base):
    __tablename__ = "crowd_reports"

    report_id = Column(String, primary_key=True)
    office_id = Column(String, ForeignKey("offices.office_id"), nullable=False)
    level = Column(String, nullable=False)
    timestamp = Column(BigInteger, nullable=True)  # ms since epoch
    source = Column(String, nullable=False, default="user")
    submitter_id = Column(String, nullable=True)

    __table_args__ = (
        Index("ix_crowd_reports_office_timestamp", "office_id", "timestamp"),
    )
