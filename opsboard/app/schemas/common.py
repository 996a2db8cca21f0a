"""
Shared response schemas.
"""

from pydantic import BaseModel
from typing import Optional


class MutationResponse(BaseModel):
    """Result of a create/update/delete call."""
    success: bool = True
    id: Optional[int] = None
