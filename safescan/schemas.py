from datetime import date, datetime
from typing import Optional, List, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from safescan.config import MIN_PASSWORD_LENGTH

BloodGroup = Literal["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]


class CamelModel(BaseModel):
    """Base for every model that travels over the wire in camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================== Profile parts =========================

class Medication(CamelModel):
    name: str = Field(..., min_length=1)
    dosage: Optional[str] = None
    frequency: Optional[str] = None


class EmergencyContact(CamelModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    relationship: str = Field(..., min_length=1)


class Physician(CamelModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    specialty: Optional[str] = None


class Insurance(CamelModel):
    provider: str = Field(..., min_length=1)
    member_id: str = Field(..., min_length=1)
    group_number: Optional[str] = None


# ==================== Employee =========================

class EmployeeBase(CamelModel):
    employee_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=100)
    dob: date
    age: Optional[int] = Field(None, ge=0)
    blood_group: BloodGroup
    allergies: List[str] = []
    medications: List[Medication] = []
    emergency_contacts: List[EmergencyContact] = []
    physician: Physician
    insurance: Insurance
    medical_conditions: Optional[List[str]] = None
    notes: Optional[str] = None


class EmployeeCreate(EmployeeBase):
    """Payload for a new employee. Any `_id` sent by the caller is ignored."""
    pass


# Fields that may be left out of an update but never set to null
REQUIRED_FIELDS = (
    "name", "dob", "age", "blood_group", "allergies", "medications",
    "emergency_contacts", "physician", "insurance",
)


class EmployeeUpdate(CamelModel):
    """Partial update: only the fields the caller sends are applied."""
    employee_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    dob: Optional[date] = None
    age: Optional[int] = Field(None, ge=0)
    blood_group: Optional[BloodGroup] = None
    allergies: Optional[List[str]] = None
    medications: Optional[List[Medication]] = None
    emergency_contacts: Optional[List[EmergencyContact]] = None
    physician: Optional[Physician] = None
    insurance: Optional[Insurance] = None
    medical_conditions: Optional[List[str]] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def reject_null_required(self):
        nulled = [
            name for name in REQUIRED_FIELDS
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"{', '.join(to_camel(n) for n in nulled)} cannot be null")
        return self


class EmployeeOut(EmployeeBase):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str = Field(..., alias="_id")
    age: int
    qr_code_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QRCodeOut(CamelModel):
    qr_code_data_url: str
    emergency_url: str


# ==================== Accounts =========================

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., validation_alias="user_id")
    email: EmailStr
    name: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthOut(BaseModel):
    user: UserOut
    token: str
    token_type: str = "bearer"
