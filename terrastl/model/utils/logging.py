"""Logging utilities for model operations."""

import logging
import json


class StructuredLogger:
    """Logger that adds structured context to messages."""
    
    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, msg: str, **context):
        """Log debug message with structured context."""
        self._log(logging.DEBUG, msg, **context)
        
    def info(self, msg: str, **context):
        """Log info message with structured context."""
        self._log(logging.INFO, msg, **context)

    def warning(self, msg: str, **context):
        """Log warning message with structured context."""
        self._log(logging.WARNING, msg, **context)
        
    def error(self, msg: str, **context):
        """Log error message with structured context."""
        self._log(logging.ERROR, msg, **context)
        
    def _log(self, level: int, msg: str, **context):
        """Internal method to format and log messages."""
        if not self.logger.isEnabledFor(level):
            return
        if context:
            msg = f"{msg} | {json.dumps(context, default=str)}"
        self.logger.log(level, msg)

# Create default logger instances
mesh_logger = StructuredLogger("terrastl.model.mesh")
pipeline_logger = StructuredLogger("terrastl.model.pipeline")
