"""
Storage operations for employee medical profiles.

Routes call these helpers with a request-scoped SQLAlchemy session. Nested
profile parts (medications, contacts, physician, insurance) are stored as
camelCase JSON documents, the same shape the API returns.
"""
import logging
from datetime import date
from typing import List, Optional

from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from safescan.models import Employee
from safescan.schemas import EmployeeCreate, EmployeeUpdate

logger = logging.getLogger(__name__)

# Employee columns that hold JSON documents rather than scalars
DOCUMENT_FIELDS = {
    "allergies", "medications", "emergency_contacts",
    "physician", "insurance", "medical_conditions",
}


def calculate_age(dob: date, today: Optional[date] = None) -> int:
    """Whole years between `dob` and `today`."""
    today = today or date.today()
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return max(years, 0)


def _column_values(payload, fields) -> dict:
    """Map validated payload fields onto Employee column values."""
    documents = payload.model_dump(include=set(fields) & DOCUMENT_FIELDS, by_alias=True, mode="json")
    values = {}
    for name in fields:
        if name in DOCUMENT_FIELDS:
            values[name] = documents.get(to_camel(name))
        else:
            values[name] = getattr(payload, name)
    return values


def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def list_employees(db: Session) -> List[Employee]:
    return db.query(Employee).order_by(Employee.created_at.desc()).all()


def get_employee(db: Session, employee_id: str) -> Optional[Employee]:
    return db.query(Employee).filter(Employee.id == employee_id).first()


def create_employee(db: Session, payload: EmployeeCreate) -> Employee:
    values = _column_values(payload, EmployeeCreate.model_fields)
    if values.get("age") is None:
        values["age"] = calculate_age(payload.dob)

    employee = Employee(**values)
    db.add(employee)
    _commit(db)
    db.refresh(employee)
    logger.info("Created employee %s (%s)", employee.id, employee.name)
    return employee


def update_employee(db: Session, employee: Employee, payload: EmployeeUpdate) -> Employee:
    """Apply only the fields present in `payload`; everything else is kept."""
    changes = _column_values(payload, payload.model_fields_set)
    # A new date of birth without an explicit age moves the age with it
    if "dob" in changes and "age" not in changes:
        changes["age"] = calculate_age(changes["dob"])

    for name, value in changes.items():
        setattr(employee, name, value)
    _commit(db)
    db.refresh(employee)
    logger.info("Updated employee %s fields=%s", employee.id, sorted(changes))
    return employee


def delete_employee(db: Session, employee: Employee) -> None:
    employee_id = employee.id
    db.delete(employee)
    _commit(db)
    logger.info("Deleted employee %s", employee_id)


def set_qr_code(db: Session, employee: Employee, data_url: str) -> Employee:
    employee.qr_code_url = data_url
    _commit(db)
    db.refresh(employee)
    return employee
