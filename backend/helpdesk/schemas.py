"""Request schemas validated before any service is invoked.

Update schemas distinguish three states per field: omitted (not in
``model_fields_set``), explicit null, and a value. Services read only the
supplied fields via :meth:`PartialUpdate.changes`.
"""
from __future__ import annotations
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from helpdesk.constants.enums import UserRole, TicketCategory, TicketPriority, TicketStatus, OutageType
from helpdesk.errors import ValidationError

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
EMAIL_PATTERN = r'^[^@\s]+@[^@\s]+\.[^@\s]+$'

SchemaT = TypeVar('SchemaT', bound=BaseModel)


class RfoDetails(BaseModel):
    outage_type: Optional[OutageType] = None
    affected_areas: Optional[List[str]] = None
    estimated_duration: Optional[str] = None
    services_affected: Optional[List[str]] = None
    root_cause: Optional[str] = None
    resolution_steps: Optional[str] = None


class PartialUpdate(BaseModel):
    """Base for update payloads keyed by ``id``.

    Fields listed in ``NON_NULLABLE`` may be omitted but not sent as null.
    """
    NON_NULLABLE: ClassVar[Tuple[str, ...]] = ()

    id: int

    @model_validator(mode='after')
    def reject_explicit_nulls(self):
        for name in self.NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f'{name} may not be null')
        return self

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(mode='json', exclude_unset=True, exclude={'id'})


# --- Users ---

class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8)
    role: UserRole


class UserUpdate(PartialUpdate):
    NON_NULLABLE = ('name', 'email', 'role')

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    role: Optional[UserRole] = None


class LoginInput(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str


class UserQuery(BaseModel):
    role: Optional[UserRole] = None
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    offset: int = Field(default=0, ge=0)


# --- Tickets ---

class TicketCreate(BaseModel):
    subject: str = Field(min_length=1)
    description: str = Field(min_length=1)
    category: TicketCategory
    priority: TicketPriority
    customer_id: int
    rfo_details: Optional[RfoDetails] = None


class TicketUpdate(PartialUpdate):
    NON_NULLABLE = ('subject', 'description', 'category', 'priority', 'status')

    subject: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[TicketCategory] = None
    priority: Optional[TicketPriority] = None
    status: Optional[TicketStatus] = None
    assigned_agent_id: Optional[int] = None
    rfo_details: Optional[RfoDetails] = None


class TicketAssign(BaseModel):
    agent_id: int


class TicketQuery(BaseModel):
    customer_id: Optional[int] = None
    assigned_agent_id: Optional[int] = None
    status: Optional[TicketStatus] = None
    category: Optional[TicketCategory] = None
    priority: Optional[TicketPriority] = None
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    offset: int = Field(default=0, ge=0)
    sort: Optional[str] = None


class StatsQuery(BaseModel):
    agent_id: Optional[int] = None


# --- Comments ---

class CommentCreate(BaseModel):
    ticket_id: int
    user_id: int
    content: str = Field(min_length=1)
    is_internal: bool = False


class CommentUpdate(PartialUpdate):
    NON_NULLABLE = ('content', 'is_internal')

    content: Optional[str] = Field(default=None, min_length=1)
    is_internal: Optional[bool] = None


# --- Attachments ---

class AttachmentCreate(BaseModel):
    ticket_id: int
    filename: str
    file_path: str
    file_size: int
    mime_type: str
    uploaded_by: int


def parse_payload(schema_cls: Type[SchemaT], data: Optional[Dict[str, Any]]) -> SchemaT:
    """Validate ``data`` against ``schema_cls`` raising the domain ValidationError."""
    try:
        return schema_cls.model_validate(data or {})
    except PydanticValidationError as e:
        fields = [
            {'field': '.'.join(str(p) for p in err['loc']) or '__root__', 'message': err['msg']}
            for err in e.errors()
        ]
        summary = '; '.join(f"{f['field']}: {f['message']}" for f in fields)
        raise ValidationError(summary or 'invalid payload', errors=fields) from e


__all__ = [
    'RfoDetails', 'PartialUpdate', 'UserCreate', 'UserUpdate', 'LoginInput', 'UserQuery',
    'TicketCreate', 'TicketUpdate', 'TicketAssign', 'TicketQuery', 'CommentCreate',
    'StatsQuery', 'CommentUpdate', 'AttachmentCreate', 'parse_payload', 'DEFAULT_LIMIT', 'MAX_LIMIT',
]
