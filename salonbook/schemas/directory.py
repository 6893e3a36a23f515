from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class Company(BaseModel):
    id: int
    name: str


class Branch(BaseModel):
    id: int
    name: str
    address: Optional[str] = None


class Service(BaseModel):
    """A bookable service offered by a branch."""

    id: int
    name: str
    branch_id: Optional[int] = None
    category_id: Optional[int] = None
    price: float = 0.0
    duration_minutes: int = 0


class EmployeeServiceAssignment(BaseModel):
    """Which services an employee performs, with optional overrides.

    Unset or zero overrides inherit the value from the Service record.
    """

    service_id: int
    price: Optional[float] = None
    duration_minutes: Optional[int] = None


class Employee(BaseModel):
    id: int
    name: str
    branch_id: int
    position: Optional[str] = None
    visible_in_booking: bool = True
    services: List[EmployeeServiceAssignment] = Field(default_factory=list)

    def assignment_for(self, service_id: int) -> Optional[EmployeeServiceAssignment]:
        return next(
            (item for item in self.services if item.service_id == service_id),
            None,
        )


class EmployeeService(BaseModel):
    """Service offering as seen for one employee, overrides applied."""

    service_id: int
    name: str
    price: float
    duration_minutes: int


class EmployeeListResponse(BaseModel):
    branch_id: int
    total: int
    items: List[Employee]


class ServiceListResponse(BaseModel):
    branch_id: int
    total: int
    items: List[Service]
