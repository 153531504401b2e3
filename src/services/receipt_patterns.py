"""
Pattern and keyword tables for receipt text extraction.

Everything here is compiled once at import time and never mutated, so the
parser can run concurrently from any number of request handlers. Adding a
language means adding entries to these tables, not touching the parser.

Covered languages: English, Russian, Ukrainian, Polish, Belarusian.
"""

import re


# ========== LENGTH LIMITS ==========

VENDOR_MIN_LENGTH = 3     # exclusive
VENDOR_MAX_LENGTH = 100   # exclusive
ITEM_LINE_MIN_LENGTH = 5
ITEM_LINE_MAX_LENGTH = 200  # bounds regex backtracking on garbage lines
ITEM_NAME_MIN_LENGTH = 2

# Relative difference allowed between the sum of item prices and the total
ITEMS_TOTAL_TOLERANCE = 0.10


# ========== LINE CLASSIFICATION ==========

DATE_LINE = re.compile(r'^\d{2}[./-]\d{2}[./-]\d{2,4}')
NUMBERS_ONLY_LINE = re.compile(r'^[\d\s.,]+$')


# ========== DATES ==========

# Month stems; the pattern below accepts any inflected ending after the stem
_MONTH_STEMS = (
    # English
    'jan', 'feb', 'mar', 'apr', 'may', 'jun', 'jul', 'aug', 'sep', 'oct', 'nov', 'dec',
    # Russian
    'янв', 'фев', 'мар', 'апр', 'ма[йя]', 'июн', 'июл', 'авг', 'сен', 'окт', 'ноя', 'дек',
    # Ukrainian
    'січ', 'лют', 'берез', 'квіт', 'трав', 'черв', 'лип', 'серп', 'верес', 'жовт', 'листоп', 'груд',
    # Polish
    'stycz', 'lut', 'mar', 'kwie', 'maj', 'czerw', 'lip', 'sierp', 'wrze', 'paźdz', 'list', 'grud',
    # Belarusian
    'студз', 'лютаг', 'сакав', 'красав', 'чэрв', 'ліп', 'жнів', 'верас', 'кастрыч', 'лістап', 'снеж',
)

_MONTH_NAMES = r'(?:' + '|'.join(_MONTH_STEMS) + r')[^\W\d_]*\.?'

# Tried in order against the whole text; the first pattern that matches wins
DATE_PATTERNS = (
    ('dmy', re.compile(r'(?<!\d)(\d{2}[./]\d{2}[./]\d{4})(?!\d)')),                 # 12.03.2024  12/03/2024
    ('ymd', re.compile(r'(?<!\d)(\d{4}[-.]\d{2}[-.]\d{2})(?!\d)')),                 # 2024-03-12  2024.03.12
    ('dmy_short', re.compile(r'(?<!\d)(\d{2}[./]\d{2}[./]\d{2})(?!\d)')),           # 12.03.24
    ('ymd_short', re.compile(r'(?<!\d)(\d{2}[-.]\d{2}[-.]\d{2})(?!\d)')),           # 24-03-12
    ('day_month_name', re.compile(
        r'(?<!\d)(\d{1,2}\s+' + _MONTH_NAMES + r'\s+\d{4})(?!\d)', re.IGNORECASE)),  # 12 March 2024  12 марта 2024
    ('labeled', re.compile(
        r'(?:date|дата)\s*(?:[:\-]\s*)?(\d{1,2}[./-]\d{1,2}[./-]\d{2,4})', re.IGNORECASE)),  # Дата: 1.3.2024
)


# ========== TOTALS ==========

TOTAL_LABELS = (
    'total', 'итого', 'всего', 'suma', 'razem', 'сума', 'загалом',
    'do zapłaty', 'к оплате', 'до сплати', 'amount', 'сумма', 'kwota', 'grand total',
)

_CURRENCY = r'(?:[$€£₴₽]|zł|pln|usd|eur|uah|rub|byn|руб\.?|грн\.?)'
_AMOUNT = r'(\d+(?:[.,]\d+)?)'


def _label_pattern(label: str) -> re.Pattern:
    words = r'\s+'.join(re.escape(word) for word in label.split())
    return re.compile(
        words + r'\s*(?:[:=\-]\s*)?(?:' + _CURRENCY + r'\s*)?' + _AMOUNT, re.IGNORECASE
    )


# Every pattern is scanned over the whole text; the largest amount wins
TOTAL_PATTERNS = tuple((label, _label_pattern(label)) for label in TOTAL_LABELS)


# ========== LINE ITEMS ==========

# Case-insensitive substrings marking boilerplate lines that are never items
SERVICE_KEYWORDS = (
    # totals
    'total', 'итого', 'всего', 'suma', 'razem', 'сума',
    # payment
    'cash', 'card', 'наличн', 'картой', 'сдача', 'change',
    # tax
    'tax', 'vat', 'ндс', 'pdv',
    # courtesy
    'thank', 'спасибо', 'дякуємо',
    # document headers
    'receipt', 'чек', 'fiscal', 'фіскальний',
)

_NUMBER = r'\d+(?:[.,]\d+)?'
_PRICE = r'(?P<price>\d+[.,]\d{2})'

# Tried in order per line; the first rule that matches decides the line.
# Named groups map straight onto LineItem fields, line_total overrides price.
ITEM_RULES = (
    ('quantity', re.compile(
        r'^(?P<name>.+?)\s+(?P<quantity>' + _NUMBER + r')\s*[xх*]\s*(?P<price>' + _NUMBER + r')'
        r'(?:\s*=\s*(?P<line_total>' + _NUMBER + r'))?',
        re.IGNORECASE)),                                                      # Milk 2 x 1.75 = 3.50
    ('spaced', re.compile(r'^(?P<name>.+?)\s{2,}' + _PRICE + r'$')),          # Milk        3.50
    ('letters', re.compile(r'^(?P<name>(?:[^\W\d_]|[\s\-])+?)\s+' + _PRICE + r'$')),  # Rye-bread 2.20
)
