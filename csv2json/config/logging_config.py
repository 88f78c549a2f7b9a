import logging
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(config=None, level: Optional[str] = None) -> None:
    """
    Configure process-wide logging from the 'logging' configuration section

    Intended for entry points such as the CLI; the library itself never
    configures logging.

    Args:
        config: Csv2JsonConfig (or None for defaults)
        level: Level name overriding the configured one
    """
    log_config = config.get_logging_config() if config is not None else {}
    level_name = (level or log_config.get('level') or 'INFO').upper()

    handlers = [logging.StreamHandler()]
    if log_config.get('file'):
        handlers.append(logging.FileHandler(log_config['file']))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=log_config.get('format') or DEFAULT_FORMAT,
        handlers=handlers,
        force=True
    )
