"""
Heuristic extraction of structured receipt data from raw OCR text.

The pipeline is a pure function of its input:

    raw text -> lines -> vendor / date / total / items -> confidence -> result

Each extractor works on the same normalized input independently. Nothing
here raises for a string input: text that yields nothing produces an empty
result with zero confidence.

Known limitation: the total is the largest labeled amount anywhere in the
text, so a tax or "amount" line printing a bigger number than the real
total wins. Receipts printing a subtotal before the grand total are the
common case this favors.
"""

import math
from loguru import logger
from .receipt_types import LineItem, ReceiptExtractionResult
from .receipt_patterns import (
    DATE_LINE,
    DATE_PATTERNS,
    ITEM_LINE_MAX_LENGTH,
    ITEM_LINE_MIN_LENGTH,
    ITEM_NAME_MIN_LENGTH,
    ITEM_RULES,
    ITEMS_TOTAL_TOLERANCE,
    NUMBERS_ONLY_LINE,
    SERVICE_KEYWORDS,
    TOTAL_PATTERNS,
    VENDOR_MAX_LENGTH,
    VENDOR_MIN_LENGTH,
)


def split_lines(text: str) -> list[str]:
    """Trimmed lines in original order; blank lines are kept as ''."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines()]


def is_date_line(line: str) -> bool:
    return DATE_LINE.match(line.strip()) is not None


def is_numbers_only_line(line: str) -> bool:
    return NUMBERS_ONLY_LINE.match(line.strip()) is not None


def parse_amount(raw: str | None) -> float | None:
    """
    Parse a printed amount that may use ',' as decimal separator.

    Returns None for anything that is not a finite number.
    """
    if raw is None:
        return None
    try:
        value = float(raw.replace(",", ".").strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def extract_vendor(lines: list[str]) -> str:
    # Merchant names are printed first, ahead of dates and totals
    for line in lines:
        candidate = line.strip()
        if not VENDOR_MIN_LENGTH < len(candidate) < VENDOR_MAX_LENGTH:
            continue
        if is_date_line(candidate) or is_numbers_only_line(candidate):
            continue
        return candidate
    return ""


def extract_date(text: str) -> str:
    for label, pattern in DATE_PATTERNS:
        match = pattern.search(text)
        if match:
            logger.debug("Receipt date matched", pattern=label, date=match.group(1))
            return match.group(1)
    return ""


def extract_total(text: str) -> float:
    candidates = []
    for _, pattern in TOTAL_PATTERNS:
        for match in pattern.finditer(text):
            amount = parse_amount(match.group(1))
            if amount is not None:
                candidates.append(amount)

    if not candidates:
        return 0.0
    return max(candidates)


def is_service_line(line: str) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in SERVICE_KEYWORDS)


def parse_item_line(line: str) -> LineItem | None:
    """
    Parse one receipt line into a LineItem using the first matching rule.

    Returns None for service lines, lines outside the length limits, lines
    no rule matches, and lines whose name or price fails validation.
    """
    line = line.strip()
    if not ITEM_LINE_MIN_LENGTH <= len(line) <= ITEM_LINE_MAX_LENGTH:
        return None
    if is_service_line(line):
        return None

    for _, pattern in ITEM_RULES:
        match = pattern.match(line)
        if not match:
            continue

        fields = match.groupdict()
        name = fields["name"].strip()
        price = parse_amount(fields.get("line_total") or fields["price"])
        quantity = parse_amount(fields.get("quantity"))

        if len(name) < ITEM_NAME_MIN_LENGTH or price is None or price <= 0:
            return None
        return LineItem(
            name=name,
            quantity=quantity if quantity is not None else 1.0,
            price=price,
        )

    return None


def extract_items(lines: list[str]) -> list[LineItem]:
    items = []
    for line in lines:
        item = parse_item_line(line)
        if item is not None:
            items.append(item)
    return items


def score_confidence(vendor: str, date: str, total: float, items: list[LineItem]) -> float:
    """
    Share of structural checks that passed, in [0, 1].

    Four base checks (vendor, date, total, items) always run. When both
    items and a positive total exist, a fifth check requires the item
    prices to add up to the total within ITEMS_TOTAL_TOLERANCE.
    """
    checks = [
        bool(vendor),
        bool(date),
        total > 0,
        bool(items),
    ]

    if items and total > 0:
        items_sum = sum(item.price for item in items)
        checks.append(abs(items_sum - total) / total < ITEMS_TOTAL_TOLERANCE)

    if not checks:
        return 0.0
    return sum(checks) / len(checks)


def parse_receipt(text: str) -> ReceiptExtractionResult:
    """
    Extract vendor, date, total and line items from raw receipt text.

    Args:
        text: OCR transcription of a receipt, newline-delimited

    Returns:
        ReceiptExtractionResult; fields that could not be recovered are empty
        or zero and lower the confidence score
    """
    text = text or ""
    lines = split_lines(text)

    vendor = extract_vendor(lines)
    date = extract_date(text)
    total = extract_total(text)
    items = extract_items(lines)
    confidence = score_confidence(vendor, date, total, items)

    logger.debug(
        "Parsed receipt text",
        lines=len(lines),
        vendor=vendor,
        date=date,
        total=total,
        items=len(items),
        confidence=confidence,
    )

    return ReceiptExtractionResult(
        raw_text=text,
        vendor=vendor,
        date=date,
        total=total,
        items=items,
        confidence=confidence,
    )
