"""Custom exception classes for the application"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(str, Enum):
    """Machine-readable error category returned alongside every error message"""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    AUTHENTICATION = "authentication"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    DEPENDENCY = "dependency"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Input Errors
class ValidationError(BaseAPIException):
    """Malformed or missing input"""
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details)


class ConflictError(BaseAPIException):
    """Duplicate value for a unique field"""
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Bad credentials"""
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Unknown email or wrong password - one message for both"""
    def __init__(self):
        super().__init__("Invalid email or password")


class Unauthenticated(BaseAPIException):
    """No bearer token or no authenticated user on the request"""
    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "Not authorized, no token"):
        super().__init__(message, status_code=401)


class Forbidden(BaseAPIException):
    """Bearer token rejected"""
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message, status_code=403)


# Token Errors
class InvalidTokenError(BaseAPIException):
    """Token signature, type or stored-value check failed"""
    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid token", status_code: int = 400):
        super().__init__(message, status_code=status_code)


class ExpiredTokenError(BaseAPIException):
    """Token is past its expiry"""
    kind = ErrorKind.EXPIRED_TOKEN

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, status_code=401)


# Resource Errors
class NotFoundError(BaseAPIException):
    """Resource not found"""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class RateLimitExceededError(BaseAPIException):
    """Rate limit exceeded"""
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message, status_code=429)


# System Errors
class DependencyError(BaseAPIException):
    """Store or mail dispatch failure"""
    kind = ErrorKind.DEPENDENCY

    def __init__(self, message: str = "A backing service failed"):
        super().__init__(message, status_code=500)


class ConfigurationError(BaseAPIException):
    """Server is missing required configuration"""
    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str = "Server misconfiguration"):
        super().__init__(message, status_code=500)
