"""Custom exception classes for NCD Screen.

All exceptions inherit from NCDScreenError to allow catching all custom exceptions.
The screening engine itself raises none of these; they are raised at the
input, configuration, and content boundaries.
"""


class NCDScreenError(Exception):
    """Base exception for all NCD Screen custom exceptions."""

    pass


class ValidationError(NCDScreenError):
    """Raised when patient input data fails validation.
    
    Examples:
        - Malformed profile JSON
        - Unknown enum value in a strict profile dictionary
        - CSV file missing the required name column
    """

    pass


class ConfigurationError(NCDScreenError):
    """Raised when configuration loading or validation fails.
    
    Examples:
        - Missing required configuration
        - Invalid configuration file format
        - Configuration value out of range
    """

    pass


class ContentError(NCDScreenError):
    """Raised when the content catalog is used with an unsupported value.
    
    Examples:
        - Detail block declaring an unknown interactive component
    """

    pass
