from csv2json.config.csv2json_config import Csv2JsonConfig
from csv2json.config.logging_config import configure_logging

__all__ = ['Csv2JsonConfig', 'configure_logging']
