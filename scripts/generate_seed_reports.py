import argparse
import datetime
import os
import sys
import uuid

import numpy as np
import pandas as pd
from pydantic import ValidationError
from sqlalchemy.orm import sessionmaker

# Add project root to path to import schemas
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from crowdsense.common.database import init_db, make_engine
from crowdsense.common.schemas import Office, ReportRecord
from crowdsense.common.logging import setup_logger
from crowdsense.crowd.infrastructure.repositories import SQLOfficeRepository, SQLReportRepository

logger = setup_logger("crowdsense.seed")

# Sample offices for major Indian cities
SAMPLE_OFFICES = [
    Office(id="psk-andheri", name="Passport Seva Kendra - Andheri", type="passport",
           city="mumbai", latitude=19.1136, longitude=72.8697,
           address="Andheri West, Mumbai, Maharashtra 400053"),
    Office(id="aadhaar-bandra", name="Aadhaar Enrollment Center - Bandra", type="aadhaar",
           city="mumbai", latitude=19.0596, longitude=72.8295,
           address="Bandra East, Mumbai, Maharashtra 400051"),
    Office(id="po-cp", name="Passport Office - CP", type="passport",
           city="delhi", latitude=28.6304, longitude=77.2177,
           address="Connaught Place, New Delhi 110001"),
    Office(id="rto-janakpuri", name="RTO - Janakpuri", type="driving_license",
           city="delhi", latitude=28.6280, longitude=77.0815,
           address="Janakpuri, New Delhi"),
    Office(id="psk-koramangala", name="Passport Seva Kendra - Koramangala", type="passport",
           city="bangalore", latitude=12.9352, longitude=77.6245,
           address="Koramangala, Bangalore, Karnataka 560095"),
    Office(id="rto-annanagar", name="RTO Office - Anna Nagar", type="driving_license",
           city="chennai", latitude=13.0850, longitude=80.2101,
           address="Anna Nagar, Chennai, Tamil Nadu"),
]

LEVELS = ["low", "medium", "high"]
# Office rush hours: opening queue and post-lunch
RUSH_HOURS = [9, 10, 11, 14, 15]

def generate_reports(num_samples: int, hours_back: int, seed: int, now: datetime.datetime) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    data = []

    for _ in range(num_samples):
        office = SAMPLE_OFFICES[rng.integers(len(SAMPLE_OFFICES))]
        created = now - datetime.timedelta(minutes=int(rng.integers(0, hours_back * 60)))

        # Rush hour reports lean towards high
        if created.hour in RUSH_HOURS:
            level = rng.choice(LEVELS, p=[0.1, 0.4, 0.5])
        else:
            level = rng.choice(LEVELS, p=[0.5, 0.35, 0.15])

        record = {
            "id": f"seed_{uuid.UUID(int=int(rng.integers(0, 2**63))).hex[:12]}",
            "entity_id": office.id,
            "level": str(level),
            "timestamp": int(created.timestamp() * 1000),
            "source": "seed",
            "submitter_id": None,
        }

        # Validate with Pydantic schema
        try:
            data.append(ReportRecord(**record).model_dump(mode="json"))
        except ValidationError as e:
            logger.warning(f"Error validating record: {e}")

    df = pd.DataFrame(data)
    df["datetime"] = pd.to_datetime(df["timestamp"], unit="ms")
    return df.sort_values(by="datetime")

def load_into_db(df: pd.DataFrame, url: str):
    """Stores the sample offices and the generated reports in the database."""
    engine = make_engine(url)
    init_db(engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    office_repo = SQLOfficeRepository(session_factory)
    for office in SAMPLE_OFFICES:
        if office_repo.get(office.id) is None:
            office_repo.add(office)

    report_repo = SQLReportRepository(session_factory)
    for row in df.drop(columns=["datetime"]).to_dict(orient="records"):
        row["timestamp"] = int(row["timestamp"])
        report_repo.add(ReportRecord(**row).to_domain())
    logger.info(f"Loaded {len(SAMPLE_OFFICES)} offices and {len(df)} reports into {url}")

def main():
    parser = argparse.ArgumentParser(description="Generate synthetic seed crowd reports")
    parser.add_argument("--samples", type=int, default=500)
    parser.add_argument("--hours-back", type=int, default=6)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output", default="data/seed/crowd_reports_seed.csv")
    parser.add_argument("--load-db", metavar="URL", help="Also load offices and reports into this database")
    args = parser.parse_args()

    logger.info(f"Generating {args.samples} synthetic seed reports...")
    df = generate_reports(args.samples, args.hours_back, args.seed, datetime.datetime.now())
    logger.info(f"Level distribution:\n{df['level'].value_counts()}")

    os.makedirs(os.path.dirname(args.output), exist_ok=True)
    df.drop(columns=["datetime"]).to_csv(args.output, index=False)
    logger.info(f"Dataset saved to {args.output}")

    if args.load_db:
        load_into_db(df, args.load_db)

if __name__ == "__main__":
    main()
