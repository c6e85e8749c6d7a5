"""
Custom exceptions for the top-down pose pipeline

Provides specific exception types for:
- Caller contract violations (bbox, pixel buffers, tensor shapes)
- Model loading and inference errors
- Configuration errors
- Image loading errors
"""

from typing import Optional, Sequence


class TopDownException(Exception):
    """
    Base exception class for all topdown pipeline exceptions

    All custom exceptions inherit from this class so callers can catch
    every pipeline failure with a single except clause.
    """
    pass


class PreconditionError(TopDownException):
    """
    Raised when a caller violates an input contract

    Reasons:
    - Bounding box with zero or negative width/height
    - Pixel buffer length does not match width * height * channels
    - Unknown channel layout
    - Source image smaller than the network input
    - Heatmap containing NaN values

    Example:
        >>> from topdown.core.exceptions import PreconditionError
        >>> from topdown.geometry import BoundingBox, validate_bbox
        >>> try:
        ...     validate_bbox(BoundingBox(0, 0, 0, 10))
        ... except PreconditionError as e:
        ...     print(f"Rejected bbox: {e}")
    """
    pass


class ShapeMismatchError(PreconditionError):
    """
    Raised when a tensor does not have the declared shape

    Applicable to:
    - Preprocessed tensors handed to the inference session
    - Heatmaps returned by the inference session
    - Heatmaps handed to the decoder

    Attributes:
        expected: The shape the caller declared
        actual: The shape that was received
    """

    def __init__(
        self,
        message: str,
        expected: Optional[Sequence[int]] = None,
        actual: Optional[Sequence[int]] = None
    ):
        self.expected = tuple(expected) if expected is not None else None
        self.actual = tuple(actual) if actual is not None else None
        if self.expected is not None or self.actual is not None:
            message = f"{message} (expected {self.expected}, got {self.actual})"
        super().__init__(message)


class ConfigError(TopDownException):
    """
    Raised when configuration is invalid

    Reasons:
    - Configuration value is out of valid range
    - Invalid configuration file format
    - Environment variable cannot be parsed

    Example:
        >>> from topdown.core.exceptions import ConfigError
        >>> from topdown.core.config import TopDownConfig
        >>> try:
        ...     config = TopDownConfig.from_yaml("broken.yaml")
        ... except ConfigError as e:
        ...     print(f"Configuration error: {e}")
    """
    pass


class ModelLoadError(TopDownException):
    """
    Raised when the pose model cannot be loaded

    Reasons:
    - onnxruntime is not installed
    - Model file does not exist or is corrupted
    """
    pass


class InferenceError(TopDownException):
    """
    Raised when model inference fails

    Reasons:
    - Runtime error inside the inference engine
    - Session already closed
    """
    pass


class ImageLoadError(TopDownException):
    """
    Raised when an image fails to load or save

    Reasons:
    - File does not exist
    - File format is corrupted or unsupported
    """
    pass


def format_exception(e: TopDownException) -> str:
    """
    Format a pipeline exception for display

    Args:
        e: The TopDownException instance

    Returns:
        Formatted error message string, e.g. "[PreconditionError] ..."
    """
    return f"[{type(e).__name__}] {e}"
