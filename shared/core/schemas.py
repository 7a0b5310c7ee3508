from pydantic import BaseModel
from typing import Generic, Optional, TypeVar, Union
from uuid import UUID

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    account_type: str = "admin"
    # tenant owning the data; employees carry their admin's id
    admin_id: Optional[UUID] = None
    name: Optional[str] = None
    exp: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.account_type.lower() == "admin"

    @property
    def tenant_id(self) -> Optional[UUID]:
        if self.admin_id:
            return self.admin_id
        if self.is_admin:
            try:
                return UUID(self.user_id)
            except ValueError:
                return None
        return None

    @property
    def employee_id(self) -> Optional[str]:
        return None if self.is_admin else self.user_id


class Lookup(BaseModel):
    id: Union[str, UUID]  # accepts both UUID and str
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
