import logging
import sys

import uvicorn

from alice_bridge.config import load_settings, mask_key
from alice_bridge.errors import ConfigError
from alice_bridge.main import create_app

logger = logging.getLogger("alice_bridge")


def main():
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error("❌ %s", e)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    logger.info("🚀 %s bridge on http://%s:%d", settings.profile.display_name, settings.host, settings.port)
    logger.info("🔑 %s: %s", settings.profile.api_key_env, mask_key(settings.api_key))

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
