class EarthwiseException(Exception):
    """Base exception for Earthwise"""

    pass


class UnauthorizedException(EarthwiseException):
    """Raised when ID token validation fails"""

    pass


class NotFoundException(EarthwiseException):
    """Raised when resource not found"""

    pass


class ForbiddenException(EarthwiseException):
    """Raised when user tries to access another user's data"""

    pass


class ValidationException(EarthwiseException):
    """Raised for business logic validation errors"""

    pass


class IdentityProviderError(EarthwiseException):
    """Raised when the wallet identity provider fails to init, connect or disconnect"""

    pass
