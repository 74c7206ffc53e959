"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

Every exception carries the HTTP status it maps to, so the API layer can
render any of them as ``{"error": message}`` without knowing the concrete
type. Messages are user-facing.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""

    status_code = 400


class ValidationException(DomainException):
    """Exception for bad or missing input."""


class AuthenticationException(ApplicationException):
    """Missing, invalid or expired credentials."""

    status_code = 401


class AuthorizationException(ApplicationException):
    """Authenticated actor is not allowed to perform the operation."""

    status_code = 403

    def __init__(self, message: str = "Forbidden", details: Optional[dict] = None):
        super().__init__(message, details)


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[object] = None,
        message: str = "Não encontrado",
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            message,
            details or {"resource_type": resource_type, "resource_id": resource_id}
        )


class InternalServiceException(ApplicationException):
    """Unexpected failure on a primary write path."""

    status_code = 500


class RepositoryException(InternalServiceException):
    """Base exception for repository/data access errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    status_code = 502

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


class NotificationException(ExternalServiceException):
    """Exception for notification webhook failures."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__("Notification Webhook", message, details)
