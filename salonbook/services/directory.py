from __future__ import annotations

import logging
from typing import List, Optional

from salonbook.clients.api import BookingApiClient
from salonbook.engine.slots import resolve_duration, resolve_price
from salonbook.schemas.directory import Branch, Company, Employee, EmployeeService, Service
from salonbook.services.exceptions import NotFoundError
from salonbook.services.mock_store import DirectoryRepository, get_mock_store
from salonbook.services.payloads import parse_list

logger = logging.getLogger(__name__)


class DirectoryService:
    """Read-only view of companies, branches, staff and services."""

    def __init__(
        self,
        client: BookingApiClient,
        *,
        repository: DirectoryRepository | None = None,
    ) -> None:
        self._client = client
        self._repository = repository
        if self._client.use_mock_data:
            self._repository = repository or get_mock_store().directory

    def _mock_repository(self) -> DirectoryRepository:
        if not self._repository:
            raise RuntimeError("Mock directory repository not configured")
        return self._repository

    async def get_company(self) -> Optional[Company]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            companies = self._mock_repository().list_companies()
        else:
            data = await self._client.get("/companies")
            companies = parse_list(Company, data, "company")
        return companies[0] if companies else None

    async def list_branches(self, company_id: int) -> List[Branch]:
        logger.info("Listing branches for company %s", company_id)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return self._mock_repository().list_branches(company_id)
        data = await self._client.get(f"/companies/{company_id}/branches")
        return parse_list(Branch, data, "branch")

    async def list_employees(
        self, branch_id: int | None = None, *, company_id: int | None = None
    ) -> List[Employee]:
        if company_id is None:
            company = await self.get_company()
            if company is None:
                return []
            company_id = company.id

        if self._client.use_mock_data:
            await self._client.simulate_latency()
            employees = self._mock_repository().list_employees(company_id)
        else:
            data = await self._client.get("/employees", params={"company_id": company_id})
            employees = parse_list(Employee, data, "employee")

        if branch_id is None:
            return employees
        return [employee for employee in employees if employee.branch_id == branch_id]

    async def get_employee(self, employee_id: int) -> Employee:
        employees = await self.list_employees()
        employee = next((item for item in employees if item.id == employee_id), None)
        if employee is None:
            raise NotFoundError(f"Employee '{employee_id}' not found")
        return employee

    async def list_services(self, branch_id: int) -> List[Service]:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return self._mock_repository().list_services(branch_id)
        data = await self._client.get(f"/branches/{branch_id}/services")
        return parse_list(Service, data, "service")

    async def employee_services(self, employee_id: int) -> List[EmployeeService]:
        """Services the employee performs, with price and duration overrides applied."""

        employee = await self.get_employee(employee_id)
        services = await self.list_services(employee.branch_id)
        by_id = {service.id: service for service in services}

        offerings: List[EmployeeService] = []
        for assignment in employee.services:
            service = by_id.get(assignment.service_id)
            if service is None:
                continue
            offerings.append(
                EmployeeService(
                    service_id=service.id,
                    name=service.name,
                    price=resolve_price(employee, service.id, services) or 0.0,
                    duration_minutes=resolve_duration(employee, service.id, services) or 0,
                )
            )
        return offerings
