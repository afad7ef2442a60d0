from pydantic import EmailStr, Field
from typing import Optional, List
from enum import Enum

from api.models.common_schemas import CamelModel, CompanySummary


class UserRole(str, Enum):
    """
    User roles, strictly ordered by privilege: user < admin < superadmin.

    Comparison operators follow privilege, not the string values.
    """
    USER = "user"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]

    def has_privilege(self, required: "UserRole") -> bool:
        """True when this role is at least as privileged as `required`."""
        return self.rank >= UserRole(required).rank

    def __lt__(self, other):
        if not isinstance(other, UserRole):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, UserRole):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, UserRole):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, UserRole):
            return NotImplemented
        return self.rank >= other.rank


_ROLE_RANK = {
    UserRole.USER: 0,
    UserRole.ADMIN: 1,
    UserRole.SUPERADMIN: 2,
}


# ============ User Schemas ============

class User(CamelModel):
    """Admin-console user mapped from the identity provider"""
    id: str
    clerk_id: str = Field(..., description="External identity-provider id")
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    role: UserRole
    company_id: str
    created_at: str
    updated_at: str
    company: Optional[CompanySummary] = None


class CreateUserInput(CamelModel):
    """Schema for creating a user from the admin form"""
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.USER
    company_id: str = Field(..., min_length=1)


class UpdateUserRoleInput(CamelModel):
    """Schema for changing a user's role"""
    role: UserRole


# ============ Response Schemas ============

class UsersResponse(CamelModel):
    users: List[User]


class UserResponse(CamelModel):
    user: User
