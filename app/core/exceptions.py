"""
Custom exceptions for the REST API
"""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class APIError(HTTPException):
    """Base API error carrying a machine-readable code"""

    def __init__(
        self,
        status_code: int,
        detail: Any,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code
        self.extra = extra or {}


class NotFoundError(APIError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found",
            error_code=f"{entity.upper().replace(' ', '_')}_NOT_FOUND",
            extra={"id": entity_id},
        )


class RubricWeightExceededError(APIError):
    """Total rubric weight of a project would go above 100%"""

    def __init__(self, project_id: str, total: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "rubric weights exceed 100%", "total": total},
            error_code="RUBRIC_WEIGHT_EXCEEDED",
            extra={"project_id": project_id, "total": total},
        )


class IncompleteRubricError(APIError):
    def __init__(self, missing: list):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "all rubric criteria must be scored", "missing": missing},
            error_code="RUBRIC_INCOMPLETE",
            extra={"missing": missing},
        )
