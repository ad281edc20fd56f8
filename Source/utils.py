#!/usr/bin/env python3
"""
Utility functions for BillChat
"""

import logging
import re
from pathlib import Path
from typing import Optional

from config import LOG_LEVEL

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None):
    """Configure root logging once for the command-line front end"""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def format_currency(amount: float, currency: str = 'USD') -> str:
    """Format currency amount with proper symbols"""
    if not isinstance(amount, (int, float)):
        return "0.00"

    currency_symbols = {
        'BGN': 'лв',
        'USD': '$',
        'EUR': '€',
        'GBP': '£'
    }

    symbol = currency_symbols.get(currency, currency)

    if currency in ['USD', 'EUR', 'GBP']:
        sign = '-' if amount < 0 else ''
        return f"{sign}{symbol}{abs(amount):.2f}"
    else:
        return f"{amount:.2f} {symbol}"


def try_parse_int(value: str) -> Optional[int]:
    """Safely parse integer from string"""
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return None


def try_parse_float(value: str) -> Optional[float]:
    """Safely parse float from string"""
    try:
        return float(value.strip().replace(',', '.'))
    except (AttributeError, ValueError):
        return None


def validate_menu_choice(choice: str, valid_choices: list[str]) -> Optional[str]:
    """Validate a menu choice against allowed options"""
    if not isinstance(choice, str):
        return None
    choice = choice.strip()
    return choice if choice in set(valid_choices) else None


def ensure_directory_exists(directory: str) -> bool:
    """Ensure a directory exists, create it if it doesn't"""
    try:
        Path(directory).mkdir(parents=True, exist_ok=True)
        return True
    except OSError as e:
        logger.error("Failed to create directory %s: %s", directory, e)
        return False


def clean_text_for_display(text: str, max_length: int = 100) -> str:
    """Clean text for safe display in UI"""
    if not isinstance(text, str):
        return ""

    # Remove control characters
    text = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', text)

    # Normalize whitespace
    text = ' '.join(text.split())

    # If too long
    if len(text) > max_length:
        text = text[:max_length-3] + "..."

    return text
