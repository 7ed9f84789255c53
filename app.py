import logging
import os
import socket

from market_dash.logging_config import configure_logging
from market_dash.ui.dash_app import create_dash_app

configure_logging()
logger = logging.getLogger("market_dash.app")

app = create_dash_app()
# WSGI entry point, e.g. `gunicorn app:server`
server = app.server


def find_free_port(start_port: int, attempts: int = 100) -> int:
    """First port from start_port that nothing on localhost is listening on."""
    for port in range(start_port, start_port + attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            if s.connect_ex(("localhost", port)) != 0:
                return port
    return start_port


def main() -> None:
    preferred_port = int(os.getenv("PORT", "8050"))
    port = find_free_port(preferred_port)
    if port != preferred_port:
        logger.warning("Port taken, using the next free one", extra={"requested": preferred_port, "port": port})

    debug = os.getenv("DEBUG", "0") == "1"
    logger.info("Starting dashboard", extra={"port": port, "debug": debug})
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    main()
