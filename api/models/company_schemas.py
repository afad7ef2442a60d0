from pydantic import ConfigDict, Field, field_validator
from typing import Optional, List

from api.models.common_schemas import CamelModel
from api.models.user_schemas import UserRole

DOMAIN_PATTERN = r"^[a-zA-Z0-9][a-zA-Z0-9-]*\.[a-zA-Z]{2,}$"


# ============ Domain Schemas ============

class Domain(CamelModel):
    """Email domain that authorizes self-registration into a company"""
    id: str
    domain: str
    company_id: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None


class DomainSummary(CamelModel):
    """Domain as embedded in a company payload"""
    id: str
    domain: str
    created_at: str


class AddDomainInput(CamelModel):
    """Schema for adding a domain to a company"""
    domain: str = Field(..., min_length=1, pattern=DOMAIN_PATTERN, description="Hostname, e.g. acme.com")

    @field_validator("domain")
    @classmethod
    def lowercase_domain(cls, value: str) -> str:
        return value.lower()


class DomainResponse(CamelModel):
    domain: Domain


# ============ Company Schemas ============

class UserCount(CamelModel):
    users: int


class Company(CamelModel):
    """Tenant with its authorized domains"""
    id: str
    name: str
    timezone: str = Field("UTC", description="IANA timezone identifier")
    created_at: str
    updated_at: str
    domains: List[DomainSummary]
    count: Optional[UserCount] = Field(None, alias="_count")


class CompanyUserSummary(CamelModel):
    """User row shown on the company detail view"""
    id: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    role: UserRole
    created_at: str


class CompanyWithUsers(Company):
    """Company detail including its users"""
    users: Optional[List[CompanyUserSummary]] = None


class CreateCompanyInput(CamelModel):
    """Schema for creating a new company"""
    name: str = Field(..., min_length=1, max_length=100, description="Company name")
    timezone: str = Field("UTC", description="IANA timezone identifier")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Acme Corp",
                "timezone": "Europe/Amsterdam"
            }
        }
    )


class UpdateCompanyInput(CamelModel):
    """Schema for updating a company"""
    name: Optional[str] = Field(None, min_length=1, max_length=100, description="Company name")
    timezone: Optional[str] = Field(None, description="IANA timezone identifier")


# ============ Response Schemas ============

class CompaniesResponse(CamelModel):
    companies: List[Company]


class CompanyResponse(CamelModel):
    company: CompanyWithUsers
