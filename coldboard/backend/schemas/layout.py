"""
Layout Schemas.

Responsive profiles, layout output, filter state and the request/response
bodies of the layout endpoints.
"""

from collections.abc import Mapping
from datetime import date
from typing import Literal
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from coldboard.backend.core.utils import parse_iso_date
from coldboard.backend.schemas.note import Note

LayoutProfile = Literal["grid", "mobile"]


class ResponsiveConfig(BaseModel):
    """Card sizing resolved for one viewport width."""

    model_config = ConfigDict(frozen=True)

    card_width: int
    grid_gap: int
    container_padding: int
    card_padding: int


class LayoutRect(BaseModel):
    """Absolute position of one card. Recomputed on every layout pass."""

    model_config = ConfigDict(frozen=True)

    note_id: str
    x: int
    y: int
    width: int
    height: int

    @property
    def bottom(self) -> int:
        return self.y + self.height


class BoardLayout(BaseModel):
    """Result of one placement pass; rects follow the input note order."""

    model_config = ConfigDict(frozen=True)

    profile: LayoutProfile
    columns: int
    card_width: int
    rects: list[LayoutRect]
    column_bottoms: list[int]
    board_height: int


class DateRange(BaseModel):
    """Inclusive calendar-day range; either bound may be open."""

    model_config = ConfigDict(frozen=True)

    start: date | None = None
    end: date | None = None

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


class FilterState(BaseModel):
    """
    Board filters as shown in the toolbar.

    Mirrored into the page URL as ``search``, ``startDate``, ``endDate`` and
    ``author`` so filtered views can be shared and bookmarked.
    """

    model_config = ConfigDict(frozen=True)

    search_text: str = ""
    date_range: DateRange | None = None
    author_id: str | None = None

    @property
    def is_active(self) -> bool:
        has_dates = self.date_range is not None and not self.date_range.is_open
        return bool(self.search_text.strip()) or has_dates or bool(self.author_id)

    def to_query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.search_text:
            params["search"] = self.search_text
        if self.date_range is not None:
            if self.date_range.start is not None:
                params["startDate"] = self.date_range.start.isoformat()
            if self.date_range.end is not None:
                params["endDate"] = self.date_range.end.isoformat()
        if self.author_id:
            params["author"] = self.author_id
        return params

    def to_query_string(self) -> str:
        """``?search=...`` or an empty string when no filter is set."""
        params = self.to_query_params()
        return f"?{urlencode(params)}" if params else ""

    @classmethod
    def from_query_params(cls, params: Mapping[str, str]) -> "FilterState":
        """Build filters from URL query parameters; bad dates become open bounds."""
        start = parse_iso_date(params.get("startDate"))
        end = parse_iso_date(params.get("endDate"))
        return cls(
            search_text=params.get("search") or "",
            date_range=DateRange(start=start, end=end) if (start or end) else None,
            author_id=params.get("author") or None,
        )


class LayoutRequest(BaseModel):
    """Body of POST /board/layout."""

    notes: list[Note]
    viewport_width: int = Field(gt=0, description="Viewport width in CSS pixels")
    filters: FilterState = Field(default_factory=FilterState)
    current_user_id: str | None = Field(
        default=None,
        description="Notes by this user are placed first",
    )
    editing_checklist_for: str | None = Field(
        default=None,
        description="Note currently showing an in-progress checklist item",
    )


class LayoutResult(BaseModel):
    layout: BoardLayout
    note_ids: list[str] = Field(description="Visible note ids in display order")
    filters_active: bool
    total_notes: int


class ProfileRequest(BaseModel):
    """Body of POST /board/config."""

    viewport_width: int = Field(ge=0)


class ProfileResponse(BaseModel):
    config: ResponsiveConfig
    profile: LayoutProfile
