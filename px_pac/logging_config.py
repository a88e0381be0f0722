"""
Logging setup for processes embedding the PAC runtime.
"""

import logging
import logging.handlers
import queue
from pathlib import Path
from typing import List, Optional

SCRIPT_LOGGER_NAME = "px_pac.script"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_script_listener: Optional[logging.handlers.QueueListener] = None


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> logging.handlers.QueueListener:
    """
    Set up application logging.

    Messages written by PAC scripts through log() go to the "px_pac.script"
    logger, which only enqueues records; a background listener hands them to
    the real handlers so a slow handler never stalls a script.

    Args:
        log_level: Root log level name
        log_file: Optional file to log to in addition to stderr

    Returns:
        The listener draining the script log queue
    """
    global _script_listener

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    if _script_listener is not None:
        _script_listener.stop()

    script_queue = queue.SimpleQueue()
    script_logger = logging.getLogger(SCRIPT_LOGGER_NAME)
    for handler in list(script_logger.handlers):
        script_logger.removeHandler(handler)
    script_logger.addHandler(logging.handlers.QueueHandler(script_queue))
    script_logger.setLevel(logging.INFO)
    script_logger.propagate = False

    _script_listener = logging.handlers.QueueListener(script_queue, *handlers, respect_handler_level=True)
    _script_listener.start()
    return _script_listener


def shutdown_logging():
    """Flush and stop the script log listener."""
    global _script_listener
    if _script_listener is not None:
        _script_listener.stop()
        _script_listener = None
