from abc import ABC, abstractmethod
from typing import Any


class BaseWorkflow(ABC):
    """Abstract base for all deterministic cart workflows."""

    @abstractmethod
    async def execute(self, *args: Any, **kwargs: Any) -> Any:
        """Run the full workflow pipeline."""
