"""
Employee Endpoints Module

Employees are only referenced as job assignees; they are listed for the
assignment picker and maintained here.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from fieldservice.api import deps
from fieldservice.db.scoping import get_owned, owned
from fieldservice.db.session import commit, get_db
from fieldservice.models.employee import Employee
from fieldservice.schemas.employee import EmployeeCreate, EmployeeRead, EmployeeUpdate

router = APIRouter()


@router.get("", response_model=List[EmployeeRead])
def list_employees(
    active_only: bool = False,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """List the owner's employees by name; ``active_only`` hides deactivated ones."""
    statement = owned(Employee, owner_id)
    if active_only:
        statement = statement.where(Employee.is_active == True)  # noqa: E712
    return db.exec(statement.order_by(Employee.name)).all()


@router.post("", response_model=EmployeeRead)
def create_employee(
    employee_in: EmployeeCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    employee = Employee(owner_id=owner_id, **employee_in.model_dump())
    employee.name = employee.name.strip()
    db.add(employee)
    commit(db)
    db.refresh(employee)
    return employee


@router.patch("/{employee_id}", response_model=EmployeeRead)
def update_employee(
    employee_id: str,
    employee_update: EmployeeUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    employee = get_owned(db, Employee, employee_id, owner_id)
    for key, value in employee_update.model_dump(exclude_unset=True).items():
        setattr(employee, key, value)
    db.add(employee)
    commit(db)
    db.refresh(employee)
    return employee
