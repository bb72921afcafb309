"""Validation schemas for bars, modules, styles, and the root config.

These are the strict counterparts of the permissive entities in
:mod:`waybarctl.domain.models`. They are never stored: the validation
layer dumps an entity to a plain mapping and checks it against one of
these models, turning any :class:`pydantic.ValidationError` into dotted
field paths.

Native keys keep their Waybar spelling via field aliases, so error paths
read ``config.margin-top`` rather than ``config.margin_top``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
)

from waybarctl.domain.types import ModulePosition, resolve_module_type

# --- Shared field types ---

PositiveInt = Annotated[StrictInt, Field(gt=0)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]
Number = Annotated[float, Strict()]
PositiveNumber = Annotated[float, Strict(), Field(gt=0)]
NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class Schema(BaseModel):
    """Base for all validation schemas: alias-keyed, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- Bar ---


class BarConfigSchema(Schema):
    """Bar-level settings: positioning, dimensions, spacing, behavior."""

    layer: Literal["top", "bottom", "overlay"] | None = None
    position: Literal["top", "bottom", "left", "right"] | None = None
    output: StrictStr | list[StrictStr] | None = None

    height: PositiveInt | None = None
    width: PositiveInt | None = None

    margin: StrictStr | None = None
    margin_top: Number | None = Field(default=None, alias="margin-top")
    margin_bottom: Number | None = Field(default=None, alias="margin-bottom")
    margin_left: Number | None = Field(default=None, alias="margin-left")
    margin_right: Number | None = Field(default=None, alias="margin-right")
    spacing: Number = 4

    mode: Literal["dock", "hide", "invisible", "overlay"] | None = None
    exclusive: StrictBool = True
    passthrough: StrictBool = False
    gtk_layer_shell: StrictBool = Field(default=True, alias="gtk-layer-shell")
    ipc: StrictBool = False

    name: StrictStr | None = None
    reload_style_on_change: StrictBool = True

    modules_left: list[StrictStr] | None = Field(default=None, alias="modules-left")
    modules_center: list[StrictStr] | None = Field(default=None, alias="modules-center")
    modules_right: list[StrictStr] | None = Field(default=None, alias="modules-right")


class BarDefinitionSchema(Schema):
    """Bar shape. Modules are checked one by one by the validation layer."""

    id: NonEmptyStr
    name: StrictStr | None = None
    enabled: StrictBool = True
    order: NonNegativeInt
    config: BarConfigSchema
    modules: list[Any]


# --- Module instance ---


class ModuleInstanceSchema(Schema):
    """Module shape, independent of the type-specific config payload."""

    id: NonEmptyStr
    type: StrictStr
    custom_name: StrictStr | None = None
    position: ModulePosition
    order: NonNegativeInt
    config: dict[str, Any]
    enabled: StrictBool = True

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if resolve_module_type(value) is None:
            msg = f"Unknown module type: {value}"
            raise ValueError(msg)
        return value


# --- Styles ---


class CSSPropertySchema(Schema):
    property: NonEmptyStr
    value: StrictStr
    important: StrictBool = False


class StyleDefinitionSchema(Schema):
    id: NonEmptyStr
    name: StrictStr
    selector: NonEmptyStr
    properties: list[CSSPropertySchema]
    enabled: StrictBool = True


# --- Root ---


class ConfigMetadataSchema(Schema):
    version: StrictStr
    created_at: datetime
    modified_at: datetime
    app_version: StrictStr


class WaybarConfigSchema(Schema):
    """Root shape only; bars and styles get their own validation pass."""

    bars: list[Any]
    styles: list[Any]
    metadata: ConfigMetadataSchema
