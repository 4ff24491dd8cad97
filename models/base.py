from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Optional, TypeVar

M = TypeVar("M", bound="BaseGolfModel")


class BaseGolfModel(BaseModel):
    """Shared configuration for every scorecard model."""
    model_config = ConfigDict(validate_assignment=True)

    def update_field(self, field_name: str, value: Any) -> Optional[str]:
        """Apply a user correction. Returns the validation message on failure, else None."""
        try:
            setattr(self, field_name, value)
            return None
        except ValidationError as e:
            return e.errors()[0]['msg']

    def clone(self: M) -> M:
        """Independent deep copy; concurrent strategies never share instances."""
        return self.model_copy(deep=True)
