"""
Custom exception classes for schema loading and form rendering errors.

This module provides specialized exception classes for the two failure
kinds of a render pass (reading the schema source and decoding it) plus
configuration loading, with centralized logging helpers.
"""

import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)

# Longest slice of the offending payload kept in error context
EXCERPT_LENGTH = 80


class FormEngineError(Exception):
    """
    Base exception for form engine errors.

    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class LoadError(FormEngineError):
    """
    Exception raised when the schema source cannot be read.

    This includes missing files, permission issues and encoding errors.
    """

    def __init__(self, source: Any, original_error: Exception,
                 message: Optional[str] = None):
        self.source = source
        self.original_error = original_error

        if message is None:
            message = f"Failed to read schema from {source}: {str(original_error)}"

        context = {
            'source': str(source),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check that the schema asset exists in the assets directory",
            "Ensure file permissions allow reading",
            "Verify the file is UTF-8 encoded",
            "The form will be shown empty until the schema can be read"
        ]

        super().__init__(message, context, recovery_suggestions)


class ParseError(FormEngineError):
    """
    Exception raised when schema text cannot be decoded into a form schema.

    Syntax errors and structural/type mismatches are reported the same way.
    """

    def __init__(self, original_error: Exception, raw_text: Optional[str] = None,
                 message: Optional[str] = None):
        self.original_error = original_error
        self.excerpt = (raw_text or "")[:EXCERPT_LENGTH]

        if message is None:
            message = f"Failed to parse form schema: {str(original_error)}"

        context = {
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error),
            'excerpt': self.excerpt
        }

        recovery_suggestions = [
            "Verify the schema is valid JSON",
            "Check that every field has a 'type' and every section has 'from', 'to' and 'index'",
            "Check value types (e.g. 'required' must be true or false)"
        ]

        super().__init__(message, context, recovery_suggestions)


class ConfigurationLoadError(FormEngineError):
    """
    Exception raised when configuration file loading fails.

    This includes YAML parsing errors, permission issues, etc.
    """

    def __init__(self, config_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.config_path = config_path
        self.original_error = original_error

        if message is None:
            message = f"Failed to load configuration from {config_path}: {str(original_error)}"

        context = {
            'config_path': str(config_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }

        recovery_suggestions = [
            "Check if config.yaml exists and is readable",
            "Verify YAML syntax is correct",
            "Application will use default configuration as fallback"
        ]

        super().__init__(message, context, recovery_suggestions)


def log_error_with_context(error: FormEngineError, operation: str) -> None:
    """
    Log error with full context information.

    Args:
        error: FormEngineError instance
        operation: Description of the operation that failed
    """
    logger.error(f"Form error during {operation}")
    logger.error(f"Error type: {type(error).__name__}")
    logger.error(f"Error message: {error.message}")

    if error.context:
        logger.error("Error context:")
        for key, value in error.context.items():
            logger.error(f"  {key}: {value}")

    if error.recovery_suggestions:
        logger.info("Recovery suggestions:")
        for i, suggestion in enumerate(error.recovery_suggestions, 1):
            logger.info(f"  {i}. {suggestion}")


def handle_form_error(error: Exception, operation: str) -> bool:
    """
    Centralized handling for errors raised during a render pass.

    Args:
        error: Exception that occurred
        operation: Description of the operation that failed

    Returns:
        True if the screen can continue with an empty form, False otherwise
    """
    if isinstance(error, (LoadError, ParseError, ConfigurationLoadError)):
        log_error_with_context(error, operation)
        return True

    if isinstance(error, FormEngineError):
        log_error_with_context(error, operation)
        return False

    logger.error(f"Unexpected error in {operation}: {error}")
    return False
