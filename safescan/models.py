#These objects represent the employee medical profiles and the accounts that manage them
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, JSON, ForeignKey
from safescan.db import Base


def _new_id():
    return uuid.uuid4().hex


def _utcnow():
    return datetime.now(timezone.utc)


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(32), primary_key=True, default=_new_id)
    employee_id = Column(String(50), unique=True, index=True, nullable=True)
    name = Column(String(100), nullable=False)
    dob = Column(Date, nullable=False)
    age = Column(Integer, nullable=False)
    blood_group = Column(String(3), nullable=False)

    # Nested parts of the profile are stored as JSON documents
    allergies = Column(JSON, nullable=False, default=list)
    medications = Column(JSON, nullable=False, default=list)
    emergency_contacts = Column(JSON, nullable=False, default=list)
    physician = Column(JSON, nullable=False)
    insurance = Column(JSON, nullable=False)
    medical_conditions = Column(JSON, nullable=True)

    qr_code_url = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<Employee(id={self.id}, name='{self.name}')>"


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class AuthToken(Base):
    __tablename__ = "auth_tokens"

    # sha256 of the bearer token; the token itself is never stored
    token_hash = Column(String(64), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
