"""Native module ids and internal entity ids.

Two id kinds:
- Native id: ``type`` or ``type#customName``. Used by Waybar both as an
  entry in the ``modules-*`` arrays and as the key of the module's config
  object. The codec here is shared by the transformation and validation
  layers so both agree on the shape.
- Internal id: opaque UUID4 string for bars, modules, and styles. Never
  written to the native format.
"""

from __future__ import annotations

import uuid

NATIVE_ID_SEPARATOR = "#"


def encode_native_id(module_type: str, custom_name: str | None = None) -> str:
    """Build the native id for a module.

    Examples:
        >>> encode_native_id("battery")
        'battery'
        >>> encode_native_id("battery", "bat0")
        'battery#bat0'
        >>> encode_native_id("hyprland/workspaces", "ws1")
        'hyprland/workspaces#ws1'
    """
    if custom_name:
        return f"{module_type}{NATIVE_ID_SEPARATOR}{custom_name}"
    return module_type


def decode_native_id(native_id: str) -> tuple[str, str | None]:
    """Split a native id at the first ``#`` into ``(type, custom_name)``.

    Examples:
        >>> decode_native_id("battery")
        ('battery', None)
        >>> decode_native_id("battery#bat0")
        ('battery', 'bat0')
        >>> decode_native_id("custom#a#b")
        ('custom', 'a#b')
    """
    module_type, sep, custom_name = native_id.partition(NATIVE_ID_SEPARATOR)
    if not sep:
        return module_type, None
    return module_type, custom_name or None


def new_id() -> str:
    """Generate a fresh internal entity id."""
    return str(uuid.uuid4())
