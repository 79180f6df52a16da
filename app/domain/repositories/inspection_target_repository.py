"""Inspection target repository interface"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from ..enums import TargetPeriod


class IInspectionTargetRepository(ABC):

    @abstractmethod
    async def upsert(self, period: TargetPeriod, target_date: date, target_value: int) -> int:
        """Create or replace the target for (period, target_date)"""
        pass

    @abstractmethod
    async def get_value(self, period: TargetPeriod, target_date: date) -> Optional[int]:
        pass
