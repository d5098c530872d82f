"""
Pagination utilities
"""

from pydantic import BaseModel, Field

class PaginationParams(BaseModel):
    """Pagination parameters for ledger history"""
    page: int = Field(1, ge=1, description="Page number")
    size: int = Field(50, ge=1, le=200, description="Page size")

    @property
    def offset(self) -> int:
        """Calculate offset"""
        return (self.page - 1) * self.size
