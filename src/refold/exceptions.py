#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/exceptions.py
"""Custom exceptions for the refold library.

Exception Hierarchy
-------------------
- RefoldError (base exception)

  - ValidationError (parameter/option validation)

  - ParsingError (source text that cannot be turned into a tree)

  - PartitionError (fragment tree that violates its structural guarantees)

  - RenderingError (edited tree that cannot be regenerated)

Failure of a transformation is not an exception: it is expressed as a ``None``
result of the transformation.

"""

from __future__ import annotations

from typing import Any


class RefoldError(Exception):
    """Base exception class for all refold-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(RefoldError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class ParsingError(RefoldError):
    """Exception raised when source text cannot be parsed.

    Parameters
    ----------
    message : str
        Description of the parsing error
    file_name : str, optional
        Name of the source being parsed
    line : int, optional
        1-based line of the error, when known
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        file_name: str | None = None,
        line: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error with location details."""
        super().__init__(message, original_error=original_error)
        self.file_name = file_name
        self.line = line


class PartitionError(RefoldError):
    """Exception raised when a fragment tree is not well formed.

    Partitioning never raises this on its own; it is raised by the explicit
    well-formedness check and by partitioning with ``check_invariants`` enabled.
    """


class RenderingError(RefoldError):
    """Exception raised when an edited tree cannot be regenerated.

    Parameters
    ----------
    message : str
        Description of the rendering error
    node : object, optional
        The node that could not be rendered
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, node: Any = None, original_error: Exception | None = None):
        """Initialize the rendering error with the offending node."""
        super().__init__(message, original_error=original_error)
        self.node = node
