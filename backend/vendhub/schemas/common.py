from pydantic import BaseModel


class DeleteResult(BaseModel):
    """Outcome of a delete; count is the number of rows the backend actually removed."""

    deleted: bool
    count: int = 0
