"""Domain exceptions raised by adapters and services."""


class StoreError(Exception):
    """A persistence call against the hosted store failed."""


class FoodLookupError(Exception):
    """A food-database or barcode lookup could not produce nutrition data."""


class FoodNotFoundError(FoodLookupError):
    """The requested food or barcode does not exist upstream."""
