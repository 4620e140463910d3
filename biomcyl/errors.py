"""Exceptions raised for readings or payloads that cannot be used at all."""


class NonPhysicalReadingError(ValueError):
    """A corneal power that no real eye can produce (e.g. K <= 0)."""


class BiometryResponseError(ValueError):
    """A biometry payload missing the structure needed to populate readings."""
