"""
Pydantic models for the documents exchanged with the Pennsieve API.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    ValidationInfo,
    field_validator,
)


class _ApiDocument(BaseModel):
    """Shared settings: camelCase on the wire, unknown fields ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def null_is_zero_value(cls, v: Any, info: ValidationInfo) -> Any:
        """The API writes empty lists and unset strings as JSON null."""
        if v is None:
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)
        return v


class Integration(_ApiDocument):
    """A requested unit of work, including which data packages to fetch."""

    uuid: str = ""
    application_id: int = Field(default=0, alias="applicationId")
    dataset_id: str = Field(default="", alias="datasetId")
    package_ids: list[str] = Field(default_factory=list, alias="packageIds")
    # Opaque to this tool; kept as received.
    params: JsonValue = None


class ManifestEntry(_ApiDocument):
    """A single downloadable file with its presigned URL."""

    node_id: str = Field(default="", alias="nodeId")
    file_name: str = Field(default="", alias="fileName")
    path: list[str] = Field(default_factory=list)
    url: str = ""


class Manifest(_ApiDocument):
    """The download manifest returned for a set of package node identifiers."""

    data: list[ManifestEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.data)


class PackageList(_ApiDocument):
    """Request body for the download-manifest endpoint."""

    node_ids: list[str] = Field(default_factory=list, alias="nodeIds")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
