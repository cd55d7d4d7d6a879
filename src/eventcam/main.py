"""Application entry point for EventCam backend server."""

from eventcam.app import App
from eventcam.config import Config
from eventcam.logging import setup_logging
from eventcam.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
