from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from salonbook.dependencies.services import get_branch_context, get_directory_service
from salonbook.routes.errors import http_error
from salonbook.schemas.context import BranchContextResponse, BranchSelectRequest
from salonbook.schemas.directory import EmployeeListResponse, EmployeeService, ServiceListResponse
from salonbook.services import BranchContext, DirectoryService
from salonbook.services.exceptions import ServiceError

router = APIRouter()


@router.get("/directory/employees", response_model=EmployeeListResponse)
async def list_employees(
    branch_id: Optional[int] = Query(None),
    visible_only: bool = Query(False),
    session: str = Query("default"),
    context: BranchContext = Depends(get_branch_context),
    service: DirectoryService = Depends(get_directory_service),
):
    try:
        branch = await context.branch_id(session, branch_id)
        employees = await service.list_employees(branch)
    except ServiceError as exc:
        raise http_error(exc) from exc
    if visible_only:
        employees = [employee for employee in employees if employee.visible_in_booking]
    return EmployeeListResponse(branch_id=branch, total=len(employees), items=employees)


@router.get("/directory/services", response_model=ServiceListResponse)
async def list_services(
    branch_id: Optional[int] = Query(None),
    session: str = Query("default"),
    context: BranchContext = Depends(get_branch_context),
    service: DirectoryService = Depends(get_directory_service),
):
    try:
        branch = await context.branch_id(session, branch_id)
        services = await service.list_services(branch)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return ServiceListResponse(branch_id=branch, total=len(services), items=services)


@router.get("/directory/employees/{employee_id}/services", response_model=List[EmployeeService])
async def employee_services(
    employee_id: int,
    service: DirectoryService = Depends(get_directory_service),
):
    try:
        return await service.employee_services(employee_id)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/context", response_model=BranchContextResponse)
async def get_context(
    session: str = Query("default"),
    context: BranchContext = Depends(get_branch_context),
):
    try:
        return await context.load(session)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.put("/context/branch", response_model=BranchContextResponse)
async def select_branch(
    req: BranchSelectRequest,
    context: BranchContext = Depends(get_branch_context),
):
    try:
        return await context.select(req.session, req.branch_id)
    except ServiceError as exc:
        raise http_error(exc) from exc
