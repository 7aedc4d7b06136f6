"""
Credit Conversion
=================
Linear mapping between legacy integer balance credits and EUR.
"""

CREDITS_PER_EUR = 1_000_000


def credits_to_eur(credits: float) -> float:
    """Convert balance credits to EUR (1,000,000 credits == 1 EUR)."""
    return credits / CREDITS_PER_EUR


def eur_to_credits(eur: float) -> float:
    """Convert EUR to balance credits (1 EUR == 1,000,000 credits)."""
    return eur * CREDITS_PER_EUR
