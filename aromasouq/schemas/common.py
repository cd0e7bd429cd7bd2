from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class BulkUpdateResponse(BaseModel):
    success: bool = True
    message: str
    updated_count: int
