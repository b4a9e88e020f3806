from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from safescan.db import get_db
from safescan.schemas import EmployeeCreate, EmployeeUpdate, EmployeeOut, QRCodeOut
from safescan.services import employee_service, qr_service

router = APIRouter(prefix="/api/employees", tags=["employees"])


def _get_or_404(db: Session, employee_id: str):
    employee = employee_service.get_employee(db, employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")
    return employee


@router.get("")
def list_employees(db: Session = Depends(get_db)):
    employees = employee_service.list_employees(db)
    return {"data": [EmployeeOut.model_validate(e) for e in employees]}


@router.post("", status_code=201)
def create_employee(payload: EmployeeCreate, db: Session = Depends(get_db)):
    employee = employee_service.create_employee(db, payload)
    return {"data": EmployeeOut.model_validate(employee), "message": "Employee created successfully"}


@router.get("/{employee_id}")
def get_employee(employee_id: str, db: Session = Depends(get_db)):
    employee = _get_or_404(db, employee_id)
    return {"data": EmployeeOut.model_validate(employee)}


@router.put("/{employee_id}")
def update_employee(employee_id: str, payload: EmployeeUpdate, db: Session = Depends(get_db)):
    employee = _get_or_404(db, employee_id)
    employee = employee_service.update_employee(db, employee, payload)
    return {"data": EmployeeOut.model_validate(employee), "message": "Employee updated successfully"}


@router.delete("/{employee_id}")
def delete_employee(employee_id: str, db: Session = Depends(get_db)):
    employee = _get_or_404(db, employee_id)
    employee_service.delete_employee(db, employee)
    return {"data": {"_id": employee_id}, "message": "Employee deleted successfully"}


@router.get("/{employee_id}/qr")
def generate_qr_code(employee_id: str, db: Session = Depends(get_db)):
    """Render the emergency QR code for an employee and remember it on the record."""
    employee = _get_or_404(db, employee_id)
    url = qr_service.emergency_url(employee.id)
    data_url = qr_service.generate_qr_data_url(url)
    employee_service.set_qr_code(db, employee, data_url)
    return {"data": QRCodeOut(qr_code_data_url=data_url, emergency_url=url)}
