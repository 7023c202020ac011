from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class GistFile(BaseModel):
    """One entry of the ``files`` mapping in a GitHub gist response."""

    model_config = ConfigDict(extra="ignore")

    filename: str | None = None
    raw_url: str


class GistMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    files: dict[str, GistFile] = {}


class GistReference(BaseModel):
    """Result of publishing a configuration to a gist."""

    id: str
    url: str | None  # None when the gist owner could not be determined
    view_command: str

    @classmethod
    def for_gist(cls, gist_id: str, url: str | None) -> GistReference:
        return cls(id=gist_id, url=url, view_command=f"gh gist view {gist_id}")
