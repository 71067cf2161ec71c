# storefront_catalog/parsers/errors.py

"""Parser-level exceptions."""


class ParseError(ValueError):
    """Raised when a body cannot be read in the expected format."""
