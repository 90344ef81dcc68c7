"""Errors raised while normalizing wiki payloads."""


class UnusableArticleError(ValueError):
    """A payload has no usable title or identifier and cannot become a record."""
