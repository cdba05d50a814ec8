"""Export response schemas."""

from typing import Any

from app.schemas.common import CamelModel


class ExportDataResponse(CamelModel):
    format: str
    record_count: int
    content: str | None = None
    data: list[dict[str, Any]] | None = None
