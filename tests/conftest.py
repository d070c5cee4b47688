import itertools
import pytest
from crowdsense.crowd.domain.entities import CrowdLevel, Report, ReportSource
from crowdsense.common.schemas import Office

NOW = 1_709_640_000_000  # 2024-03-05 12:00:00 UTC
MINUTE = 60_000
_DEFAULT = object()

@pytest.fixture
def now():
    return NOW

@pytest.fixture
def make_report():
    counter = itertools.count(1)

    def _make(level="medium", source="user", minutes_ago=0, entity_id="office1", timestamp=_DEFAULT, **kwargs):
        return Report(
            id=f"r{next(counter)}",
            entity_id=entity_id,
            level=CrowdLevel(level),
            timestamp=NOW - minutes_ago * MINUTE if timestamp is _DEFAULT else timestamp,
            source=ReportSource(source),
            **kwargs
        )
    return _make

@pytest.fixture
def offices():
    return [
        Office(id="psk-andheri", name="Passport Seva Kendra - Andheri", type="passport",
               city="mumbai", latitude=19.1136, longitude=72.8697),
        Office(id="aadhaar-bandra", name="Aadhaar Center - Bandra", type="aadhaar",
               city="mumbai", latitude=19.0596, longitude=72.8295),
        Office(id="po-cp", name="Passport Office - CP", type="passport",
               city="delhi", latitude=28.6304, longitude=77.2177),
    ]
