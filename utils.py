"""
utils.py - Utility Functions and Helpers
=========================================
Common utility functions used throughout the system.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union
from functools import wraps
import time


logger = logging.getLogger(__name__)


# ============================================================================
# FILE OPERATIONS
# ============================================================================

def ensure_directory(path: Union[str, Path]) -> Path:
    """Ensure directory exists, create if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_json(data: Dict, filepath: Union[str, Path], indent: int = 2):
    """Save data to JSON file."""
    filepath = Path(filepath)
    ensure_directory(filepath.parent)

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=indent, default=str)

    logger.debug(f"Saved JSON to {filepath}")


def load_json(filepath: Union[str, Path]) -> Dict:
    """Load data from JSON file."""
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"JSON file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    logger.debug(f"Loaded JSON from {filepath}")
    return data


# ============================================================================
# UNIT CONVERSIONS
# ============================================================================

def cm2_to_m2(cm2: float) -> float:
    """Convert square centimeters to square meters."""
    return cm2 / 10000.0


def cm_to_m(cm: float) -> float:
    """Convert centimeters to meters."""
    return cm / 100.0


def safe_divide(numerator: float, denominator: float,
                default: float = 0) -> float:
    """Safe division with default value for division by zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def format_money(amount: float) -> str:
    """Format a price with the configured currency symbol."""
    from config import Config

    places = Config.PRICING.get('decimal_places', 2)
    symbol = Config.PRICING.get('currency_symbol', '')
    return f"{amount:.{places}f} {symbol}".strip()


# ============================================================================
# PERFORMANCE UTILITIES
# ============================================================================

def timer(func):
    """Decorator to time function execution."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.time()
        result = func(*args, **kwargs)
        end = time.time()
        logger.debug(f"{func.__name__} took {end - start:.2f} seconds")
        return result
    return wrapper


# ============================================================================
# LOGGING UTILITIES
# ============================================================================

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Setup logging configuration."""
    from config import Config

    log_config = Config.LOGGING

    # Set log level
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        log_config['format'],
        datefmt=log_config['date_format']
    )

    # Setup handlers
    handlers = []

    # Console handler
    if log_config.get('console_output', True):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler
    if log_file or log_config.get('file'):
        file_path = log_file or log_config['file']
        ensure_directory(Path(file_path).parent)

        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            file_path,
            maxBytes=log_config.get('max_bytes', 10*1024*1024),
            backupCount=log_config.get('backup_count', 5)
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True
    )

    logger.info(f"Logging configured: level={log_level}")


def round_for_output(value: Any, places: int = 2) -> Any:
    """Round floats (recursively through dicts/lists) for display."""
    if isinstance(value, float):
        return round(value, places)
    if isinstance(value, dict):
        return {k: round_for_output(v, places) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [round_for_output(v, places) for v in value]
    return value
