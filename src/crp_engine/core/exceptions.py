"""
Core Exceptions
================

Custom exceptions for the routing engine following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class OrchestrationException(ApplicationException):
    """Base exception for staged pipeline failures."""


class LaunchCancelledException(OrchestrationException):
    """Raised when a caller cancels an in-flight pipeline between stages."""

    def __init__(self, ticket_id: str, stage: Optional[str] = None):
        self.ticket_id = ticket_id
        self.stage = stage
        message = f"Pipeline for ticket {ticket_id} was cancelled"
        if stage:
            message += f" before '{stage}'"
        super().__init__(message, {"ticket_id": ticket_id, "stage": stage})


class ProgressOrderException(OrchestrationException):
    """Raised when a progress checkpoint would move backwards."""

    def __init__(self, previous: int, attempted: int):
        self.previous = previous
        self.attempted = attempted
        super().__init__(
            f"Progress cannot go from {previous}% back to {attempted}%",
            {"previous": previous, "attempted": attempted}
        )
