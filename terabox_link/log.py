import logging
import sys

ROOT_LOGGER_NAME = "terabox_link"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def setup_logger(level: str = "INFO") -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    numeric_level = getattr(logging, level.upper(), None)
    root.setLevel(numeric_level if isinstance(numeric_level, int) else logging.INFO)

    # create_app() may run several times per process (tests, reloads).
    if not any(getattr(handler, "_terabox_link", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._terabox_link = True
        root.addHandler(handler)
    return root


def get_logger(module: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module}")
