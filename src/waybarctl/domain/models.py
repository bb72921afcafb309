"""Configuration domain model.

The editor's root aggregate is :class:`WaybarConfig`: an ordered list of
bars, an ordered list of styles, and metadata. Bars own their modules;
styles are independent of bars.

All entities are frozen. Mutation happens only in the coordinating store,
which builds new instances with ``model_copy(update=...)``; the previous
root stays intact and doubles as the history snapshot. Module config
mappings are shared between snapshots, so they must be replaced, never
edited in place.

Field values are stored as given. Types on :class:`BarConfig` and on
``ModuleInstance.config`` describe what Waybar expects, but are not
enforced at construction (``SkipValidation``) so that a malformed value read
from disk survives long enough for the validation layer to report it with
a proper field path.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SkipValidation

from waybarctl.domain.ids import encode_native_id, new_id

CONFIG_FORMAT_VERSION = "1.0.0"

_Number = int | float


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class BarConfig(BaseModel):
    """Bar-level Waybar settings, one field per native top-level key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Positioning
    layer: SkipValidation[str | None] = None
    position: SkipValidation[str | None] = None
    output: SkipValidation[str | list[str] | None] = None

    # Dimensions
    height: SkipValidation[int | None] = None
    width: SkipValidation[int | None] = None

    # Spacing
    margin: SkipValidation[str | None] = None
    margin_top: SkipValidation[_Number | None] = Field(default=None, alias="margin-top")
    margin_bottom: SkipValidation[_Number | None] = Field(default=None, alias="margin-bottom")
    margin_left: SkipValidation[_Number | None] = Field(default=None, alias="margin-left")
    margin_right: SkipValidation[_Number | None] = Field(default=None, alias="margin-right")
    spacing: SkipValidation[_Number | None] = None

    # Behavior
    mode: SkipValidation[str | None] = None
    exclusive: SkipValidation[bool | None] = None
    passthrough: SkipValidation[bool | None] = None
    gtk_layer_shell: SkipValidation[bool | None] = Field(default=None, alias="gtk-layer-shell")
    ipc: SkipValidation[bool | None] = None

    # Customization
    name: SkipValidation[str | None] = None
    reload_style_on_change: SkipValidation[bool | None] = None

    @classmethod
    def from_native(cls, data: dict[str, Any]) -> BarConfig:
        """Build from a mapping keyed by native key names."""
        return cls.model_validate(data)

    def to_native(self) -> dict[str, Any]:
        """Return the set fields keyed by native key names, values untouched."""
        out: dict[str, Any] = {}
        for name, info in type(self).model_fields.items():
            value = getattr(self, name)
            if value is not None:
                out[info.alias or name] = copy.deepcopy(value)
        return out


class ModuleInstance(BaseModel):
    """One module placed in a bar zone.

    ``id`` is internal only. The native id is derived from ``type`` and
    ``custom_name`` and must be unique within the owning bar.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    type: str
    custom_name: str | None = None
    position: str
    order: int = 0
    config: SkipValidation[dict[str, Any]] = Field(default_factory=dict)
    enabled: bool = True

    @property
    def native_id(self) -> str:
        return encode_native_id(self.type, self.custom_name)


class BarDefinition(BaseModel):
    """A bar with its settings and the modules it exclusively owns."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str | None = None
    enabled: bool = True
    order: int = 0
    config: BarConfig = Field(default_factory=BarConfig)
    modules: list[ModuleInstance] = Field(default_factory=list)

    def get_module(self, module_id: str) -> ModuleInstance | None:
        return next((m for m in self.modules if m.id == module_id), None)

    def modules_at(self, position: str) -> list[ModuleInstance]:
        """Modules in *position*, sorted by ``order`` (stable)."""
        return sorted(
            (m for m in self.modules if m.position == position),
            key=lambda m: m.order,
        )


class CSSProperty(BaseModel):
    """A single ``property: value`` declaration."""

    model_config = ConfigDict(frozen=True)

    property: str
    value: str
    important: bool = False


class StyleDefinition(BaseModel):
    """A CSS rule: selector plus ordered declarations."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str
    selector: str
    properties: list[CSSProperty] = Field(default_factory=list)
    enabled: bool = True


class ConfigMetadata(BaseModel):
    """Format version and timestamps. Maintained by load/save, not by users."""

    model_config = ConfigDict(frozen=True)

    version: str = CONFIG_FORMAT_VERSION
    created_at: str = Field(default_factory=_now_iso)
    modified_at: str = Field(default_factory=_now_iso)
    app_version: str = CONFIG_FORMAT_VERSION

    def touched(self) -> ConfigMetadata:
        """Return a copy with ``modified_at`` set to now."""
        return self.model_copy(update={"modified_at": _now_iso()})


class WaybarConfig(BaseModel):
    """Root aggregate. Exactly one instance is live in the store at a time."""

    model_config = ConfigDict(frozen=True)

    bars: list[BarDefinition] = Field(default_factory=list)
    styles: list[StyleDefinition] = Field(default_factory=list)
    metadata: ConfigMetadata = Field(default_factory=ConfigMetadata)

    def get_bar(self, bar_id: str) -> BarDefinition | None:
        return next((b for b in self.bars if b.id == bar_id), None)

    def get_style(self, style_id: str) -> StyleDefinition | None:
        return next((s for s in self.styles if s.id == style_id), None)
