"""
Shared schema plumbing for the admin API.

Every payload is a pydantic model that doubles as the static type and the
runtime validator. Wire names are camelCase, Python attributes snake_case.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model mapping snake_case attributes to camelCase JSON keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CompanySummary(CamelModel):
    """Denormalized company reference embedded in users and videos"""
    id: str
    name: str


# ============ Error Schemas ============

class ApiErrorDetail(BaseModel):
    """Field-level validation detail returned by the API"""
    field: str
    message: str


class ApiErrorBody(BaseModel):
    """Shape of every non-2xx response body"""
    error: str
    code: Optional[str] = None
    message: Optional[str] = None
    details: Optional[List[ApiErrorDetail]] = None


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by delete endpoints"""
    message: str


# ============ Runtime Validation ============

class ValidationResult(BaseModel):
    """
    Outcome of validating a payload against a schema.

    On success `data` is the normalized JSON-shaped dict (defaults applied,
    camelCase keys). On failure `data` is the untouched input and `errors`
    carries pydantic's issue list.
    """
    success: bool
    data: Any = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)


def validate_payload(schema: Type[BaseModel], data: Any) -> ValidationResult:
    """Validate `data` against `schema` without raising."""
    try:
        model = schema.model_validate(data)
    except ValidationError as exc:
        return ValidationResult(
            success=False,
            data=data,
            errors=exc.errors(include_url=False, include_context=False),
        )
    return ValidationResult(success=True, data=model.model_dump(mode="json", by_alias=True))


def dump_input(model: BaseModel) -> Dict[str, Any]:
    """
    Serialize a request model for the wire.

    Unset optional fields are omitted; fields explicitly set to None are kept,
    so `companyId: null` ("visible to everyone") survives serialization.
    """
    return model.model_dump(mode="json", by_alias=True, exclude_unset=True)
