"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header

from coldboard.backend.core.config import get_board_config
from coldboard.backend.core.config_schema import BoardSchema


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]

# board.yaml settings; tests swap them through app.dependency_overrides
BoardSettings = Annotated[BoardSchema, Depends(get_board_config)]
