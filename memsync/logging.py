"""Logging configuration for the observation sync service."""
import logging
import sys
import os
from datetime import datetime
from memsync.config import settings

def setup_logging():
    """Configure logging for the application."""
    
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    
    # Already configured (module re-imported by uvicorn workers or tests)
    if any(getattr(handler, "_memsync", False) for handler in root_logger.handlers):
        return root_logger
    
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    
    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler._memsync = True
    root_logger.addHandler(console_handler)
    
    # File handler for production
    if settings.LOG_LEVEL.upper() == "INFO":
        try:
            os.makedirs("logs", exist_ok=True)
            file_handler = logging.FileHandler(f"logs/memsync_{datetime.now().strftime('%Y%m%d')}.log")
            file_handler.setFormatter(formatter)
            file_handler._memsync = True
            root_logger.addHandler(file_handler)
        except OSError as e:
            # If file logging fails, just log to console
            print(f"Warning: Could not set up file logging: {e}")
    
    return root_logger

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module."""
    return logging.getLogger(name)

logger = setup_logging()
