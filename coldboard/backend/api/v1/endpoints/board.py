"""
Board Layout Endpoints.

Stateless layout computation for clients that render the board themselves:
they post their notes and viewport, and get back the display order and card
positions.
"""

from fastapi import APIRouter

from coldboard.backend.core.dependencies import BoardSettings, RequestId
from coldboard.backend.core.exceptions import ValidationError
from coldboard.backend.core.logging import get_logger
from coldboard.backend.schemas.base import ApiResponse, ResponseMetadata
from coldboard.backend.schemas.layout import (
    LayoutRequest,
    LayoutResult,
    ProfileRequest,
    ProfileResponse,
)
from coldboard.backend.services.filtering import apply_filters
from coldboard.backend.services.masonry import layout_notes
from coldboard.backend.services.responsive import resolve_config, select_profile

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/layout",
    response_model=ApiResponse[LayoutResult],
    summary="Compute a board layout",
    description="Filter, order and place notes for a viewport width.",
)
async def compute_layout(
    data: LayoutRequest,
    board: BoardSettings,
    request_id: RequestId,
) -> ApiResponse[LayoutResult]:
    """Run the filter/sort pipeline, then masonry placement."""
    date_range = data.filters.date_range
    if date_range and date_range.start and date_range.end and date_range.start > date_range.end:
        raise ValidationError(
            "Date range starts after it ends",
            details={"start": date_range.start.isoformat(), "end": date_range.end.isoformat()},
        )

    ordered = apply_filters(data.notes, data.filters, data.current_user_id)
    config = resolve_config(data.viewport_width, board.breakpoints)
    layout = layout_notes(
        ordered,
        data.viewport_width,
        config=config,
        editing_checklist_for=data.editing_checklist_for,
        board=board,
    )

    logger.debug(
        "Layout computed",
        extra={
            "notes": len(data.notes),
            "visible": len(ordered),
            "columns": layout.columns,
            "profile": layout.profile,
        },
    )

    return ApiResponse(
        data=LayoutResult(
            layout=layout,
            note_ids=[note.id for note in ordered],
            filters_active=data.filters.is_active,
            total_notes=len(data.notes),
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/config",
    response_model=ApiResponse[ProfileResponse],
    summary="Resolve the card profile",
    description="Card sizing and placement profile for a viewport width.",
)
async def resolve_profile(
    data: ProfileRequest,
    board: BoardSettings,
    request_id: RequestId,
) -> ApiResponse[ProfileResponse]:
    return ApiResponse(
        data=ProfileResponse(
            config=resolve_config(data.viewport_width, board.breakpoints),
            profile=select_profile(data.viewport_width, board.masonry.mobile_breakpoint),
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )
