"""Application entry point for the WatchHub backend server."""

from watchhub.app import App
from watchhub.config import Config
from watchhub.logging import setup_logging
from watchhub.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
