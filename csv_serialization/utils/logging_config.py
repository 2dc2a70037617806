"""Logging configuration for the CSV serialization library."""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any, Optional


LOGGER_NAME = 'csv_serialization'


def setup_logging(config: Dict[str, Any]) -> logging.Logger:
    """Set up logging based on configuration.
    
    Args:
        config: Logging configuration section
        
    Returns:
        Configured logger instance
    """
    log_level = config.get('level', 'INFO')
    log_format = config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    log_file = config.get('file')
    level = getattr(logging, str(log_level).upper())
    
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    
    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    
    formatter = logging.Formatter(log_format)
    
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    # File handler with rotation, only when a log file is configured
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    logger.propagate = False
    
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.
    
    Args:
        name: Logger name (defaults to 'csv_serialization')
        
    Returns:
        Logger instance
    """
    if name is None:
        name = LOGGER_NAME
    return logging.getLogger(name)
