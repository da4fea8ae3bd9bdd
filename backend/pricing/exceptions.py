"""
Error taxonomy for the quotation pricing engine.

Calculation errors are raised synchronously to the immediate caller.
Lookup misses are not errors: they are carried as warnings on result
objects so a total can be flagged instead of silently zeroed.
"""


class PricingError(Exception):
    """Base exception for pricing calculation errors"""
    pass


class InvalidLineInputError(PricingError, ValueError):
    """Raised when a quotation line carries a negative cost, quantity or discount"""

    def __init__(self, field: str, value, message: str = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for {field}: {value!r}")


class InvalidPackageInputError(PricingError, ValueError):
    """Raised when a shipping package has negative dimensions or weight"""

    def __init__(self, field: str, value, message: str = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for package {field}: {value!r}")


class UnknownCurrencyPairError(PricingError, LookupError):
    """Raised when neither direction of a currency pair is in the rate table"""

    def __init__(self, from_currency: str, to_currency: str):
        self.from_currency = from_currency
        self.to_currency = to_currency
        super().__init__(f"No exchange rate available for {from_currency}->{to_currency}")


class ProductNotFoundError(PricingError, LookupError):
    """Raised when the product catalog has no cost for a product"""

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"No catalog cost found for product {product_id!r}")


class NoTierDataWarning(UserWarning):
    """Markup fell back to 0 because no tier markup table was available"""
    pass


class NoShippingRateMatchWarning(UserWarning):
    """No shipping rate tier covers the chargeable weight; cost needs manual entry"""
    pass
