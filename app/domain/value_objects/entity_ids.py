"""Entity ID value objects"""

from dataclasses import dataclass
from uuid import UUID, uuid4

from ..exceptions import BadRequestError


@dataclass(frozen=True)
class EntityId:
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise ValueError(f"{type(self).__name__} must be a valid UUID")

    @classmethod
    def generate(cls):
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls, uuid_str: str):
        """Create the id from its string form, 400 when malformed"""
        try:
            return cls(UUID(str(uuid_str)))
        except ValueError:
            raise BadRequestError(f"Validation failed (uuid is expected): {uuid_str}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(EntityId):
    pass


@dataclass(frozen=True)
class InspectionId(EntityId):
    pass


@dataclass(frozen=True)
class PhotoId(EntityId):
    pass


@dataclass(frozen=True)
class BranchCityId(EntityId):
    pass


@dataclass(frozen=True)
class CreditPackageId(EntityId):
    pass


@dataclass(frozen=True)
class PurchaseId(EntityId):
    pass
