import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Настраивает корневой логгер приложения"""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    )
    logger.addHandler(console_handler)

    # SQL-эхо управляется настройкой sql_echo, а не уровнем приложения
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
