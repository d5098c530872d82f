"""Shared base schemas"""

from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Optional

from cleanhood.core.exceptions import CleanhoodException

class BaseSchema(BaseModel):
    """Base schema with common configuration"""

    model_config = ConfigDict(from_attributes=True)

class ActionResult(BaseModel):
    """
    Outcome of a mutating operation
    Failures carry a human-readable message and a machine error code
    """

    success: bool
    message: Optional[str] = None
    error_code: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, message: Optional[str] = None, **data: Any) -> "ActionResult":
        return cls(success=True, message=message, data=data or None)

    @classmethod
    def fail(cls, exc: CleanhoodException) -> "ActionResult":
        return cls(success=False, message=exc.detail, error_code=exc.error_code)
