"""Pydantic schemas for extsync data files.

This module defines the data models for:
- the export file (meta, extensions, settings)
- config.yaml (tool configuration)
- editor metadata exposed by editor hosts
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Common Types
# =============================================================================

EditorType = Literal["vscode", "cursor", "vscodium"]

# Value of cli_command that asks for the CLI to be found next to the editor
AUTO_DETECT = "auto"


# =============================================================================
# Extension Descriptors
# =============================================================================


class ExtensionData(BaseModel):
    """Descriptive data for one extension.

    Field names follow the export file (camelCase for displayName).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    display_name: str | None = Field(default=None, alias="displayName")
    description: str | None = None
    version: str | None = None
    publisher: str | None = None

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Extension id cannot be empty")
        return v

    @field_validator("display_name", "description", "version", "publisher", mode="before")
    @classmethod
    def coerce_scalar(cls, v: Any) -> Any:
        # Hand-edited files sometimes carry numbers, e.g. "version": 1
        if isinstance(v, (int, float)):
            return str(v)
        return v


# =============================================================================
# Export File
# =============================================================================


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ExportMeta(BaseModel):
    """Metadata header of an export file."""

    model_config = ConfigDict(populate_by_name=True)

    exported_at: str = Field(default_factory=_utc_now, alias="exportedAt")
    source: str = ""


class ExportDocument(BaseModel):
    """An export file: editor metadata, extension list and user settings."""

    meta: ExportMeta = Field(default_factory=ExportMeta)
    extensions: list[ExtensionData] = Field(default_factory=list)
    settings: dict[str, Any] = Field(default_factory=dict)

    @field_validator("meta", "settings", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_json_data(self) -> dict[str, Any]:
        """Dump to the on-disk shape, leaving out settings when empty."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not self.settings:
            data.pop("settings", None)
        return data


# =============================================================================
# Tool Configuration
# =============================================================================


class ToolConfig(BaseModel):
    """extsync configuration (config.yaml)."""

    model_config = ConfigDict(extra="forbid")

    cli_command: str = AUTO_DETECT
    editor: EditorType | None = None
    app_root: str | None = None

    @field_validator("cli_command")
    @classmethod
    def validate_cli_command(cls, v: str) -> str:
        v = v.strip()
        return v or AUTO_DETECT


# =============================================================================
# Editor Metadata
# =============================================================================


class EditorMetadata(BaseModel):
    """Metadata about an editor host."""

    name: str
    display_name: str
    cli_name: str
    user_data_folder: str  # e.g. "Code" in ~/.config/Code/User
    extensions_folder: str  # e.g. ".vscode" in ~/.vscode/extensions
    app_roots: dict[str, list[str]] = Field(default_factory=dict)
