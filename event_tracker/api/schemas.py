from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    message: str
    correlation_id: str | None = None


class ValidationErrorResponse(ErrorResponse):
    field: str
