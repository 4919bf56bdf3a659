"""
Core Module
============

Shared core utilities and abstractions used across the routing engine.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from crp_engine.core.exceptions import (
    ApplicationException,
    DomainException,
    RepositoryException,
    ValidationException,
    ResourceNotFoundException,
    ConfigurationException,
    OrchestrationException,
    LaunchCancelledException,
    ProgressOrderException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "RepositoryException",
    "ValidationException",
    "ResourceNotFoundException",
    "ConfigurationException",
    "OrchestrationException",
    "LaunchCancelledException",
    "ProgressOrderException",
]
