import logging
from pythonjsonlogger import jsonlogger

_handler = None


def setup_logger(level: str = 'INFO'):
    global _handler
    logger = logging.getLogger()
    logger.setLevel(level)
    if _handler is not None:
        return
    _handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    _handler.setFormatter(formatter)
    logger.addHandler(_handler)
