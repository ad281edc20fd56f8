WELCOME_MESSAGE = (
    "Hi! I've analyzed your receipt. Now tell me who got what in natural language. "
    "For example: 'Julia got the burger, Peter got the fries, and we all split the nachos.'"
)

UNASSIGNED_RESPONSE = (
    "I've processed your input. There are still some unassigned items: {items}. "
    "Please clarify who should pay for these items."
)

COMPLETE_RESPONSE = "Great! All items have been assigned. Here's your final breakdown."

MATCH_NOTE = "Totals match perfectly!"
MISMATCH_NOTE = "Note: There's a small discrepancy. Please review your assignments."

PATTERNS = {
        'item_with_qty': r'^(.+?)\s+(\d+)\s*[xX×]\s*\$?([\d,\.]+)(?:\s+\$?([\d,\.]+))?\s*$',
        'qty_prefix': r'^(\d+)\s*[xX×]?\s+(.+?)\s+\$?([\d,\.]+)\s*$',
        'dash_item': r'^(.+?)\s*[-–]\s*\$?([\d,\.]+)\s*(?:USD|EUR|GBP|BGN)?\s*$',
        'simple_item': r'^(.+?)\s+\$?([\d,\.]+)\s*(?:USD|EUR|GBP|BGN)?\s*$',
    }

TOTAL_SUM_PATTERNS = [
    r'^\s*(?:GRAND\s+TOTAL|TOTAL|AMOUNT\s+DUE|BALANCE\s+DUE)[:\s]*[\$€£]?\s*([\d,\.]+)',
]

TAX_PATTERNS = [
    r'^\s*(?:SALES\s+TAX|TAX|VAT|GST)[:\s]*[\$€£]?\s*([\d,\.]+)',
]

TIP_PATTERNS = [
    r'^\s*(?:TIP|GRATUITY|SERVICE(?:\s+CHARGE)?)[:\s]*[\$€£]?\s*([\d,\.]+)',
]

# Words that never start an item line
SKIP_WORDS = [
    'total', 'subtotal', 'sub-total', 'tax', 'vat', 'gst', 'tip', 'gratuity',
    'service', 'cash', 'change', 'card', 'visa', 'mastercard', 'amex',
    'receipt', 'invoice', 'date', 'time', 'cashier', 'server', 'table',
    'thank', 'balance', 'amount', 'order', 'check',
]

# Sample receipt returned by the demo analysis backend
DEMO_RECEIPT = {
    'items': [
        {'name': 'Burger', 'price': 12.99, 'quantity': 1},
        {'name': 'Fries', 'price': 4.99, 'quantity': 1},
        {'name': 'Coke', 'price': 2.99, 'quantity': 2},
        {'name': 'Salad', 'price': 8.99, 'quantity': 1},
        {'name': 'Wine', 'price': 15.99, 'quantity': 1},
    ],
    'tax': 3.99,
    'tip': 6.50,
    'total': 52.44,
    'currency': 'USD',
}
