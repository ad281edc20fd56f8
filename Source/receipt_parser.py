"""
Receipt Parser module for BillChat
Turns receipt text or an analysis backend's reply into a Receipt
"""

import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from config import CURRENCY_DEFAULT, ITEM_PRICE_MAX, ITEM_PRICE_MIN
from constants import DEMO_RECEIPT, PATTERNS, SKIP_WORDS, TAX_PATTERNS, TIP_PATTERNS, TOTAL_SUM_PATTERNS
from data_models import AnalysisErr, AnalysisErrorKind, AnalysisOk, AnalysisResult, Receipt, ReceiptItem

logger = logging.getLogger(__name__)


class ReceiptParser:
    """Parses plain receipt text into items, tax, tip and total"""

    def _clean_price(self, price_str: str) -> float:
        """Clean and convert price string to float"""
        if not price_str:
            return 0.0

        cleaned = re.sub(r'[^\d,\.]', '', str(price_str))

        # European format (comma as decimal separator)
        if ',' in cleaned and '.' in cleaned:
            if cleaned.rfind(',') > cleaned.rfind('.'):
                cleaned = cleaned.replace('.', '').replace(',', '.')
            else:
                cleaned = cleaned.replace(',', '')
        elif ',' in cleaned and cleaned.count(',') == 1:
            if len(cleaned.split(',')[1]) <= 2:
                cleaned = cleaned.replace(',', '.')
            else:
                cleaned = cleaned.replace(',', '')

        try:
            price = float(cleaned)
        except (ValueError, TypeError):
            return 0.0

        if ITEM_PRICE_MIN <= price <= ITEM_PRICE_MAX:
            return price
        return 0.0

    def _normalize_text(self, text: str) -> str:
        """Normalize text for comparison"""
        normalized = ' '.join(text.lower().split())
        normalized = re.sub(r'[^\w\s-]', ' ', normalized)
        return normalized.strip()

    def _is_valid_item_name(self, name: str) -> bool:
        """Check if the name is likely a valid menu item"""
        if not name or len(name.strip()) < 2:
            return False

        words = self._normalize_text(name).split()
        if not words or words[0] in SKIP_WORDS:
            return False

        if not re.search(r'[^\W\d_]', name):
            return False

        return True

    def _find_amount(self, patterns: List[str], lines: List[str]) -> Optional[float]:
        for line in lines:
            for pattern in patterns:
                match = re.search(pattern, line, re.IGNORECASE)
                if match:
                    return self._clean_price(match.group(1))
        return None

    def _extract_item(self, line: str) -> Optional[ReceiptItem]:
        """Extract an item from a single line using the known layouts"""
        # Name 2 x 2.99 [5.98]
        match = re.search(PATTERNS['item_with_qty'], line)
        if match:
            name = match.group(1).strip()
            quantity = int(match.group(2))
            unit_price = self._clean_price(match.group(3))
            if self._is_valid_item_name(name) and quantity > 0 and unit_price > 0:
                return ReceiptItem(name=name, price=unit_price, quantity=quantity)

        # 2 Name 5.98
        match = re.search(PATTERNS['qty_prefix'], line)
        if match:
            quantity = int(match.group(1))
            name = match.group(2).strip()
            line_total = self._clean_price(match.group(3))
            if self._is_valid_item_name(name) and quantity > 0 and line_total > 0:
                return ReceiptItem(name=name, price=line_total / quantity, quantity=quantity)

        # Name - 4.99
        match = re.search(PATTERNS['dash_item'], line)
        if match:
            name = match.group(1).strip()
            price = self._clean_price(match.group(2))
            if self._is_valid_item_name(name) and price > 0:
                return ReceiptItem(name=name, price=price)

        # Name 4.99
        match = re.search(PATTERNS['simple_item'], line)
        if match:
            name = match.group(1).strip()
            price = self._clean_price(match.group(2))
            if self._is_valid_item_name(name) and price > 0:
                return ReceiptItem(name=name, price=price)

        return None

    def _detect_currency(self, text: str) -> str:
        """Detect currency used in receipt"""
        counts = {
            'USD': len(re.findall(r'\$|USD', text, re.IGNORECASE)),
            'EUR': len(re.findall(r'€|EUR', text, re.IGNORECASE)),
            'GBP': len(re.findall(r'£|GBP', text, re.IGNORECASE)),
            'BGN': len(re.findall(r'лв|BGN', text, re.IGNORECASE)),
        }
        currency, hits = max(counts.items(), key=lambda pair: pair[1])
        return currency if hits > 0 else CURRENCY_DEFAULT

    def parse(self, text: str) -> Receipt:
        """Parse receipt text to extract items, tax, tip and total"""
        lines = [line.strip() for line in text.split('\n') if line.strip()]

        items = []
        for line in lines:
            item = self._extract_item(line)
            if item is not None:
                items.append(item)
                logger.debug("Found item: %s %dx%.2f", item.name, item.quantity, item.price)

        tax = self._find_amount(TAX_PATTERNS, lines) or 0.0
        tip = self._find_amount(TIP_PATTERNS, lines) or 0.0
        total = self._find_amount(TOTAL_SUM_PATTERNS, lines)
        if total is None:
            total = sum(item.line_total for item in items) + tax + tip
            logger.debug("No total line, using computed %.2f", total)

        receipt = Receipt(
            items=tuple(items),
            tax=tax,
            tip=tip,
            total=total,
            currency=self._detect_currency(text),
        )
        logger.info("Parsed %d items, total %.2f %s", len(items), receipt.total, receipt.currency)
        return receipt


def parse_analysis_response(response_text: Optional[str]) -> AnalysisResult:
    """Read the JSON object out of an analysis backend's reply.

    Replies may wrap the JSON in markdown or prose, so everything between the
    first ``{`` and the last ``}`` is taken as the payload.
    """
    if not response_text:
        return AnalysisErr(AnalysisErrorKind.NO_DATA)

    start = response_text.find('{')
    end = response_text.rfind('}')
    if start == -1 or end < start:
        return AnalysisErr(AnalysisErrorKind.INVALID_RESPONSE, "no JSON object in reply")

    try:
        payload = json.loads(response_text[start:end + 1])
    except json.JSONDecodeError as e:
        return AnalysisErr(AnalysisErrorKind.INVALID_RESPONSE, str(e))

    if not isinstance(payload, dict) or not isinstance(payload.get('items', []), list):
        return AnalysisErr(AnalysisErrorKind.INVALID_RESPONSE, "unexpected JSON shape")

    return AnalysisOk(Receipt.from_dict(payload))


def load_receipt(path: str) -> AnalysisResult:
    """Load a receipt from a JSON analysis reply or a plain text file"""
    file_path = Path(path)
    if not file_path.is_file():
        return AnalysisErr(AnalysisErrorKind.FILE_NOT_FOUND, str(path))

    text = file_path.read_text(encoding='utf-8')
    if file_path.suffix.lower() == '.json':
        return parse_analysis_response(text)

    receipt = ReceiptParser().parse(text)
    if not receipt.items:
        return AnalysisErr(AnalysisErrorKind.NO_DATA, f"no items found in {path}")
    return AnalysisOk(receipt)


def demo_receipt() -> Receipt:
    """The fixed sample receipt used when no analysis backend is available"""
    return Receipt.from_dict(DEMO_RECEIPT)
