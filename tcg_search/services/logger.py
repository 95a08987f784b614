import logging
import os
from typing import Dict, Any, Optional


class SearchLogger:
    def __init__(self, name: str = "card_search", log_file: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)

        # Handlers are attached once per named logger
        if self.logger.handlers:
            return

        # Console handler
        ch = logging.StreamHandler()
        ch.setLevel(logging.INFO)
        ch.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
        self.logger.addHandler(ch)

        # File handler
        log_file = log_file or os.getenv("SEARCH_LOG_FILE")
        if log_file:
            fh = logging.FileHandler(log_file)
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(fh)

    def _format_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Format extra parameters for logging"""
        if extra is None:
            return {}
        # LogRecord attributes cannot be overwritten through extra
        return {k: v for k, v in extra.items() if k not in ('args', 'msg', 'message')}

    def debug(self, msg: str, extra: Optional[Dict[str, Any]] = None):
        """Debug level logging"""
        self.logger.debug(msg, extra=self._format_extra(extra))

    def info(self, msg: str, extra: Optional[Dict[str, Any]] = None):
        """Info level logging"""
        self.logger.info(msg, extra=self._format_extra(extra))

    def warning(self, msg: str, extra: Optional[Dict[str, Any]] = None):
        """Warning level logging"""
        self.logger.warning(msg, extra=self._format_extra(extra))

    def error(self, msg: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        """Error level logging"""
        self.logger.error(msg, extra=self._format_extra(extra), exc_info=exc_info)
