import click
import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s %(name)-12s %(levelname)-8s %(message)s'

# Level used by loggers created outside of a CLI invocation
_GLOBAL_LOG_LEVEL = logging.INFO


def verbosity_to_level(verbosity: int) -> int:
    if verbosity == 0:
        return logging.INFO
    return logging.DEBUG


def set_global_log_level(level: int):
    """Set the level for every node_admission logger, existing and future."""
    global _GLOBAL_LOG_LEVEL
    _GLOBAL_LOG_LEVEL = level

    for name in logging.Logger.manager.loggerDict:
        logger = logging.getLogger(name)
        if logger.handlers and name.startswith("node_admission"):
            logger.setLevel(level)


def _context_log_level() -> int:
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return _GLOBAL_LOG_LEVEL
    if ctx.obj is not None and hasattr(ctx.obj, 'verbose'):
        return ctx.obj.verbose
    return _GLOBAL_LOG_LEVEL


def get_module_logger(mod_name: str, log_level: Optional[int] = None):
    '''Logger for a node_admission module, honouring the CLI verbosity.'''
    level = log_level if log_level is not None else _context_log_level()

    logger = logging.getLogger(mod_name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    logger.setLevel(level)
    return logger
