import os
import sys
import hydra
import uvicorn
from omegaconf import DictConfig, OmegaConf

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from crowdsense.common.config import ConfigManager, CrowdConfig
from crowdsense.common.logging import setup_logger
from crowdsense.crowd.presentation.api import app, configure

logger = setup_logger("crowdsense.server")

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    crowd_cfg = OmegaConf.merge(OmegaConf.structured(CrowdConfig), cfg.crowd)
    ConfigManager.validate(crowd_cfg)
    logger.info("Configuration loaded.")

    configure(crowd_cfg)

    server_cfg = crowd_cfg.server
    logger.info(f"Starting server at http://{server_cfg.host}:{server_cfg.port}")
    uvicorn.run(app, host=server_cfg.host, port=server_cfg.port)

if __name__ == "__main__":
    main()
