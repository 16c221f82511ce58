#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the treemark library.

This module defines the exception classes raised when a conversion cannot
produce a result at all. Structural anomalies in the input tree (unknown
tags, missing attributes, pathological nesting) are *not* exceptions; they
are reported as :class:`treemark.diagnostics.ConversionWarning` values next
to a complete best-effort result.

Exception Hierarchy
-------------------
- TreemarkError (base exception)

  - ConversionError (fatal conversion failure, no partial output)
    - ParseError (HTML could not be turned into a node tree)
    - EncodingError (malformed byte sequence in text content)

  - ValidationError (parameter/option validation)

  - DependencyError (selected parser backend not installed)

  - FetchError (HTTP retrieval of a source document failed)

  - OutputWriteError (writing the Markdown result failed)

"""

from typing import Any


class TreemarkError(Exception):
    """Base exception class for all treemark-specific errors.

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


class ConversionError(TreemarkError):
    """Exception raised when a conversion aborts.

    A ConversionError never accompanies partial output: the caller either
    receives a complete result or this exception.

    Parameters
    ----------
    message : str
        Description of the failure
    conversion_stage : str, optional
        The stage where the failure happened (e.g., "parsing", "walking")
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(self, message: str, conversion_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the conversion error."""
        super().__init__(message, original_error=original_error)
        self.conversion_stage = conversion_stage


class ParseError(ConversionError):
    """Exception raised when HTML cannot be parsed into a node tree.

    Originates upstream of the converter; when it is raised the conversion
    core never runs.

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the parse error."""
        super().__init__(message, conversion_stage="parsing", original_error=original_error)


class EncodingError(ConversionError):
    """Exception raised for malformed text encoding.

    Raised either when raw bytes cannot be decoded with the requested
    encoding, or when a text node holds characters that cannot be encoded
    as UTF-8 (lone surrogates).

    Parameters
    ----------
    message : str
        Description of the encoding problem
    encoding : str, optional
        The encoding in use
    position : int, optional
        Offset of the offending byte or character, when known
    original_error : Exception, optional
        The underlying UnicodeError

    """

    def __init__(
        self,
        message: str,
        encoding: str | None = None,
        position: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the encoding error."""
        super().__init__(message, conversion_stage="decoding", original_error=original_error)
        self.encoding = encoding
        self.position = position


class ValidationError(TreemarkError):
    """Exception raised for invalid input parameters.

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


class DependencyError(TreemarkError):
    """Exception raised when a required parser backend is not installed.

    Parameters
    ----------
    message : str
        Description of the dependency problem
    missing_packages : list of str, optional
        Distribution names that need to be installed
    original_error : Exception, optional
        The original exception

    """

    def __init__(
        self,
        message: str,
        missing_packages: list[str] | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the dependency error."""
        missing_packages = missing_packages or []
        if missing_packages:
            message = f"{message}\nInstall with: pip install {' '.join(missing_packages)}"
        super().__init__(message, original_error=original_error)
        self.missing_packages = missing_packages


class FetchError(TreemarkError):
    """Exception raised when a source document cannot be retrieved.

    Parameters
    ----------
    message : str
        Description of the retrieval failure
    url : str, optional
        The URL that was requested
    status_code : int, optional
        HTTP status code, when a response was received
    original_error : Exception, optional
        The underlying transport exception

    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the fetch error."""
        super().__init__(message, original_error=original_error)
        self.url = url
        self.status_code = status_code


class OutputWriteError(TreemarkError):
    """Exception raised when writing the Markdown output fails.

    Parameters
    ----------
    message : str
        Description of the write failure
    output_path : str, optional
        Destination that could not be written
    original_error : Exception, optional
        The underlying OSError

    """

    def __init__(self, message: str, output_path: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        super().__init__(message, original_error=original_error)
        self.output_path = output_path
