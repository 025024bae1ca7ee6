"""
Validation decorators for pixwarp image operations.

Provides reusable validation logic for the (src, dst) argument pairs shared by
cast, normalize, color and warp operations.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeAlias

import numpy as np

from pixwarp.errors import InvalidImageSize

# Python 3.12+ type alias for callables
F: TypeAlias = Callable[..., Any]


def _get_arg(args: tuple, kwargs: dict, index: int, name: str) -> Any:
    if len(args) > index:
        return args[index]
    return kwargs.get(name)


def validate_same_size(
    src_name: str = "src",
    dst_name: str = "dst",
    src_index: int = 0,
    dst_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator requiring two image arguments to have equal (width, height).

    Args:
        src_name: Keyword name of the first image
        dst_name: Keyword name of the second image
        src_index: Position of the first image in the signature
        dst_index: Position of the second image in the signature

    Returns:
        Decorated function raising InvalidImageSize on mismatch

    Example:
        >>> @validate_same_size()
        ... def normalize_mean_std(src, dst, mean, std):
        ...     ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            src = _get_arg(args, kwargs, src_index, src_name)
            dst = _get_arg(args, kwargs, dst_index, dst_name)

            if src is None or dst is None:
                # Missing argument, let function raise its own TypeError
                return func(*args, **kwargs)

            if src.size != dst.size:
                raise InvalidImageSize(src.width, src.height, dst.width, dst.height)

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_same_channels(
    src_name: str = "src",
    dst_name: str = "dst",
    src_index: int = 0,
    dst_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator requiring two image arguments to share a channel count.

    Channel arity is part of the image type, so a mismatch is a TypeError.

    Args:
        src_name: Keyword name of the first image
        dst_name: Keyword name of the second image
        src_index: Position of the first image in the signature
        dst_index: Position of the second image in the signature

    Returns:
        Decorated function with channel validation
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            src = _get_arg(args, kwargs, src_index, src_name)
            dst = _get_arg(args, kwargs, dst_index, dst_name)

            if src is None or dst is None:
                return func(*args, **kwargs)

            if src.num_channels != dst.num_channels:
                raise TypeError(
                    f"{src_name} has {src.num_channels} channels but {dst_name} has "
                    f"{dst.num_channels}. Both images must be the same Image[C] type."
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_float_dtype(param_name: str = "src", param_index: int = 0) -> Callable[[F], F]:
    """
    Decorator requiring an image argument with a floating point element type.

    Args:
        param_name: Name of parameter for error messages
        param_index: Position of parameter in function signature

    Returns:
        Decorated function with dtype validation

    Example:
        >>> @validate_float_dtype("src")
        ... def warp_perspective(src, dst, m, interpolation):
        ...     ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            image = _get_arg(args, kwargs, param_index, param_name)

            if image is None:
                return func(*args, **kwargs)

            if not np.issubdtype(image.dtype, np.floating):
                raise TypeError(
                    f"{param_name} must have a floating point dtype, got {image.dtype}. "
                    f"Convert first with image.cast(np.float32) or cast_and_scale()."
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator


def validate_same_dtype(
    src_name: str = "src",
    dst_name: str = "dst",
    src_index: int = 0,
    dst_index: int = 1,
) -> Callable[[F], F]:
    """
    Decorator requiring two image arguments to share an element dtype.

    Args:
        src_name: Keyword name of the first image
        dst_name: Keyword name of the second image
        src_index: Position of the first image in the signature
        dst_index: Position of the second image in the signature

    Returns:
        Decorated function with dtype validation
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            src = _get_arg(args, kwargs, src_index, src_name)
            dst = _get_arg(args, kwargs, dst_index, dst_name)

            if src is None or dst is None:
                return func(*args, **kwargs)

            if src.dtype != dst.dtype:
                raise TypeError(
                    f"{src_name} has dtype {src.dtype} but {dst_name} has dtype {dst.dtype}. "
                    f"Use cast_and_scale() to convert between element types."
                )

            return func(*args, **kwargs)

        return wrapper  # type: ignore

    return decorator
