from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from salonbook.schemas.directory import Branch, Company


class BranchContextResponse(BaseModel):
    session: str
    company: Optional[Company] = None
    branches: List[Branch]
    selected_branch_id: Optional[int] = None


class BranchSelectRequest(BaseModel):
    session: str = "default"
    branch_id: int
