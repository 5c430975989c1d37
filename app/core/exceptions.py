from typing import Any, Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    def __init__(self, status_code: int, detail: str, error: Optional[Any] = None):
        super().__init__(status_code=status_code, detail=detail)
        self.error = error

class ValidationError(BaseAppException):
    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class BusinessRuleViolation(BaseAppException):
    """A request that is well formed but breaks a rule that needs the database to evaluate"""
    def __init__(self, detail: str = "Action not allowed"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class NotFoundError(BaseAppException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class InternalServerError(BaseAppException):
    def __init__(self, detail: str = "Something went wrong", error: Optional[Any] = None):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail, error=error)
