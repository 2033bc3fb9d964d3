"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    LoggingSchema      → logging.yaml
    BoardSchema        → board.yaml
"""

from pydantic import BaseModel, ConfigDict, field_validator


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    external_api: int


class NotesApiSchema(_StrictBase):
    base_url: str
    timeout: int


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema
    notes_api: NotesApiSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# board.yaml
# =============================================================================


class BreakpointSchema(_StrictBase):
    min_width: int
    card_width: int
    grid_gap: int
    container_padding: int
    card_padding: int


class HeightSchema(_StrictBase):
    header_height: int
    min_content_height: int
    checklist_item_height: int
    checklist_item_spacing: int
    adding_item_height: int
    add_task_button_height: int
    average_char_width: int
    content_inset: int
    line_height: int
    min_text_lines: int


class MasonrySchema(_StrictBase):
    mobile_breakpoint: int
    grid_min_width_offset: int
    grid_max_width_offset: int
    mobile_min_width_offset: int
    footer_margin: int
    min_board_height: int
    min_board_height_mobile: int


class TimingsSchema(_StrictBase):
    delete_undo_ms: int
    resize_debounce_ms: int
    search_debounce_ms: int


class PreferencesSchema(_StrictBase):
    path: str
    last_visited_key: str


class BoardSchema(_StrictBase):
    breakpoints: list[BreakpointSchema]
    default_profile: BreakpointSchema
    height: HeightSchema
    masonry: MasonrySchema
    timings: TimingsSchema
    preferences: PreferencesSchema

    @field_validator("breakpoints")
    @classmethod
    def widest_first(cls, v: list[BreakpointSchema]) -> list[BreakpointSchema]:
        """Breakpoints must be ordered widest first and end with a catch-all."""
        if not v:
            raise ValueError("at least one breakpoint is required")
        widths = [bp.min_width for bp in v]
        if widths != sorted(widths, reverse=True):
            raise ValueError("breakpoints must be ordered by min_width, widest first")
        if widths[-1] != 0:
            raise ValueError("the last breakpoint must have min_width 0")
        return v
