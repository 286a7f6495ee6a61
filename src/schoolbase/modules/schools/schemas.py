"""
School Schemas

Platform-admin payloads for managing schools. Field rules (code format,
phone and pin code patterns) are enforced by the service so that every
rejection carries its own message.
"""

from datetime import datetime

from schoolbase.modules.shared.helpers import CamelModel


class SchoolCreate(CamelModel):
    name: str | None = None
    code: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pin_code: str | None = None
    owner_name: str | None = None
    contact_email: str | None = None
    password: str | None = None


class SchoolUpdate(SchoolCreate):
    """Same fields as creation; only the ones sent are applied."""


class SchoolResponse(CamelModel):
    """A school as shown to platform admins. The password hash never leaves the service."""

    id: int
    name: str
    code: str
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pin_code: str | None = None
    owner_name: str | None = None
    contact_email: str | None = None
    contact_phone: str
    has_password: bool
    created_at: datetime


class CodeCheckResponse(CamelModel):
    available: bool
    reason: str | None = None
    suggested_code: str | None = None


class RecentSchools(CamelModel):
    last_30_days: int
    last_7_days: int


class StateCount(CamelModel):
    state: str
    count: int


class CityCount(CamelModel):
    city: str
    count: int


class SchoolStats(CamelModel):
    total_schools: int
    recent_schools: RecentSchools
    by_state: list[StateCount]
    by_city: list[CityCount]
