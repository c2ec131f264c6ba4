from typing import Optional

from pydantic import BaseModel


class PrincipalResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
    company_id: Optional[str] = None
    is_admin: bool
    is_operator: bool
