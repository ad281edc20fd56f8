"""
Centralized configuration for BillChat with environment
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Runtime settings
CURRENCY_DEFAULT = os.getenv("BILLCHAT_DEFAULT_CURRENCY", "USD")
LOG_LEVEL = os.getenv("BILLCHAT_LOG_LEVEL", "WARNING")
EXPORT_DIR = os.getenv("BILLCHAT_EXPORT_DIR", ".")

# Thresholds
RECONCILE_TOLERANCE = float(os.getenv("BILLCHAT_RECONCILE_TOLERANCE", "0.01"))

# Price normalization
ITEM_PRICE_MIN = float(os.getenv("BILLCHAT_ITEM_PRICE_MIN", "0.0"))
ITEM_PRICE_MAX = float(os.getenv("BILLCHAT_ITEM_PRICE_MAX", "10000"))
