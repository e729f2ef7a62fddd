"""
Summary generator.
"""

from datetime import date as Date

from receipt_extraction.models.receipt import AmountField, ExtractedField

SUMMARY_MAX_LENGTH = 200


def _format_date(iso_date: str) -> str:
    return Date.fromisoformat(iso_date).strftime('%d/%m/%Y')


def generate_summary(
    merchant_name: ExtractedField[str],
    total_amount: AmountField,
    date: ExtractedField[str],
    item_count: int,
    unknown_merchant: str = "Magasin inconnu",
    max_length: int = SUMMARY_MAX_LENGTH
) -> str:
    """
    Compose a one-line French summary of the receipt.

    The merchant, date and item clauses appear only when the field holds a
    found (non-default) value. The amount clause is always present and
    always printed in euros.

    Example:
        "Achat chez CARREFOUR pour un montant de 15.50€ le 15/03/2024 (2 articles)"
    """
    summary = "Achat"

    if not merchant_name.is_default and merchant_name.value != unknown_merchant:
        summary += f" chez {merchant_name.value}"

    summary += f" pour un montant de {total_amount.value:.2f}€"

    if not date.is_default:
        summary += f" le {_format_date(date.value)}"

    if item_count > 0:
        summary += f" ({item_count} {'article' if item_count == 1 else 'articles'})"

    return summary[:max_length]
