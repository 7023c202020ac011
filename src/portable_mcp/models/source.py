"""Source descriptors: where a configuration is downloaded from."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator

from portable_mcp.errors import SourceError


class UrlSource(BaseModel):
    kind: Literal["url"] = "url"
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must use http or https scheme")
        return v


class GistSource(BaseModel):
    kind: Literal["gist"] = "gist"
    gist_id: str
    file_name: str | None = None

    @classmethod
    def parse(cls, value: str) -> GistSource:
        """Parse ``id`` or ``id/filename``.

        Only the first ``/`` separates the id from the file name. A trailing
        ``/`` with nothing after it is the same as no file name.
        """
        gist_id, _, file_name = value.strip().partition("/")
        gist_id = gist_id.strip()
        if not gist_id:
            raise SourceError(
                f"Invalid gist descriptor: {value!r}",
                suggestion="expected <gist-id> or <gist-id>/<filename>",
            )
        return cls(gist_id=gist_id, file_name=file_name.strip() or None)

    def __str__(self) -> str:
        if self.file_name:
            return f"{self.gist_id}/{self.file_name}"
        return self.gist_id


def source_from_options(json_url: str | None, gist: str | None) -> UrlSource | GistSource:
    """Build a source from the ``--json-url`` / ``--gist`` pair. Exactly one must be set."""
    if json_url and gist:
        raise SourceError("Provide either --json-url or --gist, not both")
    if json_url:
        try:
            return UrlSource(url=json_url)
        except ValueError as exc:
            raise SourceError(f"Invalid URL: {json_url!r}") from exc
    if gist:
        return GistSource.parse(gist)
    raise SourceError("Either --json-url or --gist must be provided")
