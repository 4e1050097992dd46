"""ServiceTask class for the work a schedule reminds about."""
from typing import Optional


class ServiceTask:
    """A maintenance task with labour and cost estimates."""

    def __init__(
            self,
            id: int,
            name: str,
            estimated_labour_hours: float = 0,
            estimated_cost: float = 0,
            category: Optional[str] = None,
            description: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.estimated_labour_hours = estimated_labour_hours or 0
        self.estimated_cost = estimated_cost or 0
        self.category = category
        self.description = description
