"""
Ordered pattern tables for the text extractor (English/Spanish).

Each field has a list of FieldPattern in priority order; the first pattern
that yields a usable value wins. Changing priority means reordering a
list here, not touching extractor logic.

All patterns stay on one line ([ \\t] instead of \\s) and avoid adjacent
unbounded quantifiers so matching time stays linear in line length.

Supported formats:
- Amounts: 1,234.56 / $1,234.56 / -12.50 (thousands separators stripped)
- Dates: 2024-01-15, 01/15/2024, 15.01.24, Jan 15, 2024, 15 de enero de 2024
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .base import FieldPattern, parse_english_amount

FLAGS = re.IGNORECASE

# =============================================================================
# Amounts
# =============================================================================

AMOUNT_NUMBER = r"\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?"

# Optional "(7%)" / "16%" annotation between a tax label and its value
RATE_ANNOTATION = r"(?:[ \t]*\(?[ \t]*(?P<rate>\d{1,2}(?:\.\d{1,3})?)[ \t]*%[ \t]*\)?)?"

# Separator, sign, currency, number. One whitespace run between each token.
AMOUNT_VALUE = (
    r"[ \t]*(?::[ \t]*)?"
    r"(?P<sign>-[ \t]*)?"
    r"(?:(?:USD|MXN|EUR|GBP)[ \t]*)?"
    r"(?:[$€£][ \t]*)?"
    r"(?P<amount>" + AMOUNT_NUMBER + r")(?!\.?\d|[ \t]*%)"
)


@dataclass(frozen=True)
class TaxValue:
    """Tax amount plus the rate printed next to it, if any."""

    amount: Decimal
    rate: Optional[Decimal] = None


def _convert_amount(match: re.Match) -> Optional[Decimal]:
    amount = parse_english_amount(match.group("amount"))
    if amount is None:
        return None
    if match.group("sign"):
        amount = -amount
    return amount


def _convert_tax(match: re.Match) -> Optional[TaxValue]:
    amount = _convert_amount(match)
    if amount is None:
        return None
    rate_str = match.groupdict().get("rate")
    rate = Decimal(rate_str) if rate_str else None
    return TaxValue(amount=amount, rate=rate)


def _amount_pattern(name: str, label: str) -> FieldPattern:
    return FieldPattern(name, re.compile(r"\b" + label + AMOUNT_VALUE, FLAGS), _convert_amount)


def _tax_pattern(name: str, label: str) -> FieldPattern:
    return FieldPattern(
        name,
        re.compile(r"\b" + label + RATE_ANNOTATION + AMOUNT_VALUE, FLAGS),
        _convert_tax,
    )


TOTAL_PATTERNS = [
    # "Total", "Grand Total", "Total Due", "Importe total"; not "Sub-total"/"Sub total"
    _amount_pattern(
        "total",
        r"(?<!sub-)(?<!sub )total(?:[ \t]+(?:due|amount|a[ \t]+pagar))?\b",
    ),
    _amount_pattern("amount_due", r"amount[ \t]+due\b"),
    _amount_pattern("balance_due", r"balance[ \t]+due\b"),
    _amount_pattern("monto_a_pagar", r"(?:importe|monto)[ \t]+a[ \t]+pagar\b"),
]

SUBTOTAL_PATTERNS = [
    _amount_pattern("subtotal", r"sub[ \t-]?total\b"),
    _amount_pattern("net_amount", r"net[ \t]+(?:amount|total)\b"),
    _amount_pattern("importe_neto", r"importe[ \t]+neto\b"),
]

TAX_PATTERNS = [
    _tax_pattern("tax", r"(?:sales[ \t]+)?tax\b"),
    _tax_pattern("vat", r"vat\b"),
    _tax_pattern("iva", r"iva\b"),
    _tax_pattern("impuesto", r"impuestos?\b"),
]

# =============================================================================
# Document number
# =============================================================================

NUMBER_WORDS = r"(?:number|n[uú]mero|num|nro|no|n[º°])"
NUMBER_SEPARATOR = r"[ \t]*(?:" + NUMBER_WORDS + r"\.?[ \t]*)?(?:[:#][ \t]*)*"
# Must contain at least one digit, so "Invoice Date" never yields "Date"
NUMBER_TOKEN = r"(?P<number>(?=[\w-]*\d)\w[\w-]*)"


def _convert_number(match: re.Match) -> Optional[str]:
    number = match.group("number").rstrip("-_")
    return number or None


def _number_pattern(name: str, label: str) -> FieldPattern:
    return FieldPattern(
        name,
        re.compile(r"\b" + label + r"\b" + NUMBER_SEPARATOR + NUMBER_TOKEN, FLAGS),
        _convert_number,
    )


DOCUMENT_NUMBER_PATTERNS = [
    _number_pattern("invoice", r"(?:invoice|factura)"),
    FieldPattern(
        "inv_token",
        re.compile(r"\b(?P<number>(?:inv|fac)[-#]?\d[\w-]*)", FLAGS),
        _convert_number,
    ),
    _number_pattern("bill", r"bill"),
    _number_pattern("receipt", r"(?:receipt|recibo|ticket)"),
    _number_pattern("folio", r"(?:folio|reference|referencia|ref)"),
]

# =============================================================================
# Vendor
# =============================================================================

VENDOR_LABEL_PATTERNS = [
    FieldPattern(
        "vendor_label",
        re.compile(
            r"^[ \t]*(?:from|vendor|supplier|seller|sold[ \t]+by|proveedor|emisor"
            r"|establecimiento|store|tienda)[ \t]*:[ \t]*(?P<vendor>\S[^\n]*)$",
            FLAGS | re.MULTILINE,
        ),
        lambda m: m.group("vendor").strip() or None,
    ),
]

# A first-lines candidate containing any of these is boilerplate, not a name
VENDOR_EXCLUDE_KEYWORDS = (
    "invoice",
    "total",
    "date",
    "due",
    "bill",
    "receipt",
    "tax",
    "statement",
    "factura",
    "recibo",
    "fecha",
    "estado de cuenta",
)

# Lines made only of digits/punctuation (addresses, dates, separators)
NON_NAME_LINE = re.compile(r"^[\d\s,./#*=_\-]+$")

# =============================================================================
# Dates
# =============================================================================

MONTHS = {
    # English
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
    # Spanish
    "enero": 1, "ene": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4, "abr": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8, "ago": 8,
    "septiembre": 9, "setiembre": 9, "set": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12, "dic": 12,
}

# Longest names first so "september" wins over "sep"
MONTH_NAMES = r"(?P<month>" + "|".join(sorted(MONTHS, key=len, reverse=True)) + r")"

# (name, regex, kind). kind tells the date parser how to read the groups.
DATE_PATTERNS = [
    ("iso", re.compile(r"\b(?P<y>\d{4})[-/.](?P<m>\d{1,2})[-/.](?P<d>\d{1,2})\b"), "ymd"),
    (
        "numeric",
        re.compile(r"\b(?P<a>\d{1,2})[-/.](?P<b>\d{1,2})[-/.](?P<y>\d{4}|\d{2})\b"),
        "numeric",
    ),
    (
        "month_day_year",
        re.compile(
            r"\b" + MONTH_NAMES + r"\.?[ \t]+(?P<d>\d{1,2})(?:st|nd|rd|th)?,?[ \t]+(?P<y>\d{4})\b",
            FLAGS,
        ),
        "named",
    ),
    (
        "day_month_year",
        re.compile(
            r"\b(?P<d>\d{1,2})(?:[ \t]+de)?[ \t-]+" + MONTH_NAMES
            + r"\.?,?(?:[ \t]+del?)?[ \t-]+(?P<y>\d{4})\b",
            FLAGS,
        ),
        "named",
    ),
]

ISSUE_DATE_LABEL = re.compile(
    r"\b(?:invoice[ \t]+date|issue[ \t]+date|date[ \t]+issued|issued"
    r"|(?<!due )(?<!due\t)date"
    r"|fecha(?:[ \t]+de[ \t]+(?:emisi[oó]n|expedici[oó]n|factura))?"
    r"(?![ \t]+(?:de[ \t]+venc|l[ií]mite|venc))"
    r")\b(?P<rest>[^\n]{0,80})",
    FLAGS,
)

DUE_DATE_LABEL = re.compile(
    r"\b(?:due[ \t]+date|payment[ \t]+due|due"
    r"|fecha[ \t]+de[ \t]+vencimiento|fecha[ \t]+l[ií]mite(?:[ \t]+de[ \t]+pago)?"
    r"|vencimiento|vence)\b(?P<rest>[^\n]{0,80})",
    FLAGS,
)

# =============================================================================
# Currency, tax id, payment method
# =============================================================================

CURRENCY_PATTERNS = [
    (re.compile(r"\bMXN\b|\bM\.N\.", FLAGS), "MXN"),
    (re.compile(r"\bUSD\b|\bUS\$", FLAGS), "USD"),
    (re.compile(r"\bEUR\b|€", FLAGS), "EUR"),
    (re.compile(r"\bGBP\b|£", FLAGS), "GBP"),
    (re.compile(r"\$"), "USD"),
]

TAX_ID_PATTERNS = [
    FieldPattern(
        "tax_id",
        re.compile(
            r"\b(?:tax[ \t]+id|ein|rfc|nif|cif|vat[ \t]+(?:no|number|id))\b\.?"
            r"[ \t]*(?:[:#][ \t]*)?(?P<tax_id>(?=[\w&-]*\d)[A-Z0-9&Ñ][A-Z0-9&Ñ-]{5,20})",
            FLAGS,
        ),
        lambda m: m.group("tax_id").upper(),
    ),
]

PAYMENT_METHODS = {
    "visa": "VISA",
    "mastercard": "MASTERCARD",
    "master card": "MASTERCARD",
    "amex": "AMEX",
    "american express": "AMEX",
    "check": "CHECK",
    "cheque": "CHECK",
    "cash": "CASH",
    "efectivo": "CASH",
    "transfer": "TRANSFER",
    "transferencia": "TRANSFER",
    "wire": "TRANSFER",
    "debit": "DEBIT_CARD",
    "credit card": "CARD",
    "tarjeta": "CARD",
}

PAYMENT_METHOD_NAMES = (
    r"(?P<method>american[ \t]+express|master[ \t]?card|transferencia|transfer|efectivo"
    r"|cheque|check|cash|wire|visa|amex|debit|credit[ \t]+card|tarjeta)"
)


def _convert_payment_method(match: re.Match) -> Optional[str]:
    key = re.sub(r"[ \t]+", " ", match.group("method").lower())
    return PAYMENT_METHODS.get(key)


PAYMENT_METHOD_PATTERNS = [
    FieldPattern(
        "payment_label",
        re.compile(
            r"\b(?:payment(?:[ \t]+method)?|paid[ \t]+(?:by|with)|m[eé]todo[ \t]+de[ \t]+pago"
            r"|forma[ \t]+de[ \t]+pago|pago)\b[ \t]*(?::[ \t]*)?" + PAYMENT_METHOD_NAMES + r"\b",
            FLAGS,
        ),
        _convert_payment_method,
    ),
    FieldPattern(
        "card_brand",
        re.compile(r"\b(?P<method>visa|master[ \t]?card|amex|american[ \t]+express)\b", FLAGS),
        _convert_payment_method,
    ),
]

# =============================================================================
# Line items (matched against one stripped line at a time)
# =============================================================================

LINE_AMOUNT = r"\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?"
LINE_AMOUNT_CENTS = r"\d{1,3}(?:,\d{3})+\.\d{2}|\d+\.\d{2}"

LINE_ITEM_PATTERNS = [
    # Description  Qty  UnitPrice  Amount
    (
        "qty_price_amount",
        re.compile(
            r"^(?P<description>\S.*?)[ \t]+(?P<quantity>\d+(?:\.\d+)?)"
            r"[ \t]+[$€£]?(?P<unit_price>" + LINE_AMOUNT + r")"
            r"[ \t]+[$€£]?(?P<amount>" + LINE_AMOUNT + r")$"
        ),
    ),
    # Description<2+ spaces>$12.34 (receipt style, no quantity)
    (
        "description_amount",
        re.compile(
            r"^(?P<description>\S.*?)[ \t]{2,}[$€£]?(?P<amount>" + LINE_AMOUNT_CENTS + r")$"
        ),
    ),
]

# Summary/payment lines that look like items but are not
LINE_ITEM_SKIP = re.compile(
    r"\b(?:sub[ \t-]?total|total|tax|vat|iva|impuestos?|balance|saldo|amount[ \t]+due"
    r"|change|cambio|payment|pago|paid|deposits?|withdrawals?|dep[oó]sitos?|retiros?"
    r"|discount|descuento)\b",
    FLAGS,
)

HAS_LETTER = re.compile(r"[^\W\d_]")
