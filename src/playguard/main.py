"""Application entry point for the PlayGuard server."""

from playguard.app import App
from playguard.config import Config
from playguard.logging import setup_logging
from playguard.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
