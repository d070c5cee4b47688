import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd
from omegaconf import OmegaConf
from pydantic import ValidationError

from .common.config import ConfigManager, default_config
from .common.logging import setup_logger
from .common.schemas import ReportRecord
from .crowd.domain.entities import Report

logger = setup_logger("crowdsense")

def load_reports_csv(path: Path, entity_id: Optional[str] = None) -> List[Report]:
    """
    Reads reports from a CSV file with columns
    id, entity_id, level, timestamp, source, submitter_id.
    Rows that fail validation are skipped with a warning.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    if entity_id is not None:
        df = df[df["entity_id"] == entity_id]

    reports = []
    for row in df.to_dict(orient="records"):
        cleaned = {k: (v if v != "" else None) for k, v in row.items()}
        try:
            reports.append(ReportRecord(**cleaned).to_domain())
        except ValidationError as e:
            logger.warning(f"Skipping invalid report {cleaned.get('id')}: {e.errors()[0]['msg']}")
    return reports

def load_config(config_dir: Path, profile: str, overrides: List[str]):
    if (config_dir / "crowd" / f"{profile}.yaml").exists():
        cfg = ConfigManager(config_dir).load_crowd_config(profile)
    else:
        logger.warning(f"No config profile '{profile}' in {config_dir}, using defaults")
        cfg = default_config()
    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(overrides))
        ConfigManager.validate(cfg)
    return cfg

def run_aggregate(args, cfg) -> int:
    from .crowd.application.aggregation import aggregate

    reports = load_reports_csv(Path(args.reports), args.entity)
    window = args.window or cfg.aggregation.window_minutes
    result = aggregate(reports, window, args.now)
    print(json.dumps(result.to_dict(), indent=2))
    return 0

def run_api(args, cfg) -> int:
    import uvicorn
    from .crowd.presentation.api import app, configure

    configure(cfg)
    logger.info(f"Starting server at http://{cfg.server.host}:{cfg.server.port}")
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point. Extra `key=value` arguments override config values.
    """
    parser = argparse.ArgumentParser(description="CrowdSense - crowd report aggregation")
    parser.add_argument('module', choices=['api', 'aggregate'], help="Module to run")
    parser.add_argument('reports', nargs='?', help="CSV of reports (aggregate only)")
    parser.add_argument('--entity', help="Office id to aggregate")
    parser.add_argument('--window', type=int, help="Window in minutes")
    parser.add_argument('--now', type=int, help="Reference time in ms since epoch")
    parser.add_argument('--config-dir', default="conf", help="Config directory")
    parser.add_argument('--profile', default="default", help="Config profile")

    args, overrides = parser.parse_known_args(argv)
    cfg = load_config(Path(args.config_dir), args.profile, overrides)

    if args.module == 'aggregate':
        if not args.reports:
            parser.error("aggregate requires a reports CSV")
        return run_aggregate(args, cfg)
    return run_api(args, cfg)

if __name__ == "__main__":
    sys.exit(main())
