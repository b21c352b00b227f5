from typing import List

from pydantic import BaseModel, Field


class CategoryLimit(BaseModel):
    name: str
    limit: float = 0


class BudgetLimits(BaseModel):
    monthly: float = 0
    categories: List[CategoryLimit] = Field(default_factory=list)

    @property
    def has_limits(self) -> bool:
        return bool(self.monthly) or bool(self.categories)
