"""
Module: errors

Purpose:
    Exception hierarchy shared by every composer. Callers can tell
    "bad input/config" apart from "processing failure" and decide
    whether retrying with different input makes sense.

Key Classes:
    - CompositionError: Base class for all toolkit errors
    - ContractViolationError: Missing/invalid input or settings
    - OutOfRangeError: Numeric argument outside its accepted range
    - ConfigError: Unreadable or malformed configuration file
    - ResourceError: Missing directory/file or failed read
    - ProcessingError: Corrupt image, unreadable PDF, rasterizer failure

Used By:
    - collage_toolkit.controller: Composition entry points
    - collage_toolkit.cli: Exit code mapping
"""

from __future__ import annotations


class CompositionError(Exception):
    """Base class for collage and document composition errors."""
    pass


class ContractViolationError(CompositionError, ValueError):
    """Caller passed missing or invalid arguments. Never retried."""
    pass


class OutOfRangeError(ContractViolationError):
    """Numeric argument outside its accepted range."""
    pass


class ConfigError(ContractViolationError):
    """Engine configuration file could not be read or parsed."""
    pass


class ResourceError(CompositionError, OSError):
    """Output directory missing, input file missing or unreadable."""
    pass


class ProcessingError(CompositionError):
    """Decode, rasterization or encode failure. Aborts the whole batch."""
    pass
