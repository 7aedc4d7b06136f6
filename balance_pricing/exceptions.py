"""
Pricing Errors
==============
Error taxonomy for the pricing core.
"""


class PricingError(Exception):
    """Base class for all pricing errors."""


class InvalidConfigurationError(PricingError):
    """Required configuration is missing or unusable. Fatal at startup."""


class InvalidInputError(PricingError, ValueError):
    """A calculation was requested with invalid token or rate input."""


class RateSourceError(PricingError):
    """The external exchange rate source could not provide a usable rate."""


class RateSourceUnavailable(RateSourceError):
    """Transport failure or error status from the rate source."""


class RateSourceMalformed(RateSourceError):
    """The rate source answered, but without a usable EUR rate."""
