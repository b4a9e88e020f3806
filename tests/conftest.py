"""
Pytest configuration and fixtures for backend tests
"""
import os
import sys

import pytest

# Keep the app away from the on-disk database and log file while testing
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from safescan.db import get_db, Base
from safescan.main import app

# Use in-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_employee_data():
    """Sample employee payload as the frontend sends it"""
    return {
        "employeeId": "EMP-001",
        "name": "Jane Doe",
        "dob": "1990-05-17",
        "age": 35,
        "bloodGroup": "O+",
        "allergies": ["Penicillin", "Peanuts"],
        "medications": [
            {"name": "Metformin", "dosage": "500 mg", "frequency": "twice daily"}
        ],
        "emergencyContacts": [
            {"name": "John Doe", "phone": "1234567890", "relationship": "Spouse"}
        ],
        "physician": {"name": "Dr. Smith", "phone": "5551234567", "specialty": "Cardiology"},
        "insurance": {"provider": "Acme Health", "memberId": "M-42", "groupNumber": "G-7"},
        "medicalConditions": ["Type 2 diabetes"],
        "notes": "Carries an EpiPen",
    }


@pytest.fixture
def make_employee(client, sample_employee_data):
    """Create employees through the API and return their response data"""
    def _make(**overrides):
        payload = {**sample_employee_data, "employeeId": None, **overrides}
        response = client.post("/api/employees", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _make
