"""Direct Flask server runner using environment variables."""

from __future__ import annotations

import logging
from pathlib import Path

from config import load_config
from core import setup_logger
from web import create_app

if __name__ == "__main__":
    # Load configuration
    config = load_config()

    logger = setup_logger(
        level=logging.DEBUG if config.debug else logging.INFO,
        log_file=str(Path(config.log_folder) / "app.log"),
        colored=True,
    )

    # Create Flask application
    app = create_app(config)
    logger.info(f"FundaBenefica API on http://{config.web_host}:{config.web_port}, database {config.database_path}")

    # Run Flask server
    app.run(host=config.web_host, port=config.web_port, debug=config.debug)
