"""Inspection branch city entity"""

from dataclasses import dataclass, field
from datetime import datetime

from ..value_objects.entity_ids import BranchCityId
from ..exceptions import BadRequestError


def branch_code_for(city: str) -> str:
    """Three-letter branch code derived from the city name"""
    code = city.strip()[:3].upper()
    if len(code) < 3:
        raise BadRequestError("City name must be at least 3 characters long")
    return code


@dataclass
class BranchCity:
    id: BranchCityId
    city: str
    code: str
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(cls, city: str) -> 'BranchCity':
        city = city.strip()
        now = datetime.utcnow()
        return cls(
            id=BranchCityId.generate(),
            city=city,
            code=branch_code_for(city),
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def rename(self, city: str) -> None:
        self.city = city.strip()
        self.code = branch_code_for(self.city)
        self.updated_at = datetime.utcnow()

    def toggle_active(self) -> None:
        self.is_active = not self.is_active
        self.updated_at = datetime.utcnow()
