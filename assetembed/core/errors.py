"""
assetembed Core: Exception hierarchy.

Every failure in a generation run is fatal and propagates to the caller.
Each exception carries an ErrorCode and, where one is involved, the path of
the offending file, directory or rule.
"""
from typing import Optional

from assetembed.core.constants import ErrorCode


class AssetEmbedError(Exception):
    """Base exception for all assetembed errors."""

    default_code = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        path: Optional[str] = None,
    ):
        """Initialize AssetEmbedError.

        Args:
            message: Error message
            error_code: Associated error code (defaults to the class default)
            path: Path of the file, directory or rule involved
        """
        self.message = message
        self.error_code = error_code if error_code is not None else self.default_code
        self.path = path
        super().__init__(message)


class InvalidRuleError(AssetEmbedError):
    """Malformed extension or pattern supplied for a filter rule."""

    default_code = ErrorCode.INVALID_INPUT


class InvalidIdentifierError(AssetEmbedError):
    """Constant name is not a valid identifier in the output language."""

    default_code = ErrorCode.INVALID_INPUT


class TraversalError(AssetEmbedError):
    """A filesystem entry could not be read while walking the asset root."""

    default_code = ErrorCode.NOT_FOUND


class PathError(AssetEmbedError):
    """A path cannot be expressed relative to the asset root."""

    default_code = ErrorCode.INVALID_INPUT


class EmptyResultError(AssetEmbedError):
    """A pipeline that requires assets matched none."""

    default_code = ErrorCode.NOT_FOUND


class DuplicateUriError(AssetEmbedError):
    """Two records of one pipeline normalized to the same URI."""

    default_code = ErrorCode.CONFLICT


class AssetIOError(AssetEmbedError):
    """Reading a payload or writing the artifact failed."""

    default_code = ErrorCode.INTERNAL_ERROR


class PathNotSetError(AssetEmbedError):
    """No output path was configured and OUT_DIR is not set."""

    default_code = ErrorCode.INVALID_INPUT
