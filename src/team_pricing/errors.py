"""Typed errors raised by the team item service layer.

The pricing engine itself never raises; these cover storage lookups,
join requests and write-time configuration checks.
"""


class TeamPricingError(Exception):
    """Base class for team pricing domain exceptions."""

    def __init__(self, error_code: str, explanation: str):
        self.error_code = error_code
        self.explanation = explanation
        super().__init__(f"[{self.error_code}] {self.explanation}")


class ItemNotFoundError(TeamPricingError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("ITEM_NOT_FOUND", f"Team item '{slug}' not found")


class InactiveItemError(TeamPricingError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("ITEM_INACTIVE", f"Team item '{slug}' is not active")


class DuplicateItemError(TeamPricingError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("ITEM_DUPLICATE", f"Team item with slug '{slug}' already exists")


class InvalidRequestError(TeamPricingError):
    def __init__(self, explanation: str):
        super().__init__("INVALID_REQUEST", explanation)


class PricingConfigError(TeamPricingError):
    """Pricing parameters rejected at write time."""

    def __init__(self, errors: list[str], warnings: list[str] = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__("PRICING_CONFIG", "; ".join(self.errors))
