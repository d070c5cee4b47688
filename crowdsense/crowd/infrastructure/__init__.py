from .repositories import (
    InMemoryReportRepository,
    SQLReportRepository,
    InMemoryOfficeRepository,
    SQLOfficeRepository
)
