"""Relative path computation between project files and local libraries."""

import os

from nuget_switch.core.exceptions import InvalidArgumentError


def _segments(path: str) -> list[str]:
    full_path = os.path.abspath(path).rstrip(os.sep)
    return full_path.split(os.sep)


def relative_path(target: str, base: str) -> str:
    """
    Return a path from ``base`` to ``target`` using ``..`` notation.

    Directory segments are compared case-insensitively, since solution
    manifests and hint paths are written for case-insensitive file systems.

    Args:
        target: Absolute path to reach
        base: Directory the result is relative to

    Returns:
        Relative path joined with the platform separator, or "." when
        both paths coincide

    Raises:
        InvalidArgumentError: If either path is empty or blank
    """
    if not target or not target.strip():
        raise InvalidArgumentError("Target path must not be blank", argument="target")
    if not base or not base.strip():
        raise InvalidArgumentError("Base path must not be blank", argument="base")

    target_parts = _segments(target)
    base_parts = _segments(base)

    common = 0
    while (
        common < len(target_parts)
        and common < len(base_parts)
        and target_parts[common].casefold() == base_parts[common].casefold()
    ):
        common += 1

    parts = [os.pardir] * (len(base_parts) - common) + target_parts[common:]
    return os.sep.join(parts) if parts else os.curdir
