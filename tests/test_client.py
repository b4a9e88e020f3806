"""
Test cases for the client-side EmployeeStore

The store talks to the real app through the TestClient, which stands in for
a requests session.
"""
from unittest.mock import MagicMock

import pytest
import requests

from safescan.client import EmployeeStore, EmployeeStoreError
from safescan.schemas import EmployeeUpdate


@pytest.fixture
def store(client):
    return EmployeeStore(client, base_url="http://testserver/api")


def test_fetch_employees_replaces_list(store, make_employee):
    first = make_employee(name="A")
    second = make_employee(name="B")

    store.fetch_employees()

    assert [e.id for e in store.employees] == [second["_id"], first["_id"]]
    assert store.error is None
    assert store.loading is False


def test_fetch_employees_discards_local_entries(store, make_employee):
    make_employee(name="A")
    store.fetch_employees()
    store.employees.append(store.employees[0].model_copy(update={"id": "local-only"}))

    store.fetch_employees()

    assert [e.id for e in store.employees if e.id == "local-only"] == []


def test_fetch_employees_failure_is_silent():
    """
    Test: List fetch fails
    Confirm: Error recorded, no exception raised, list untouched
    """
    session = MagicMock()
    session.request.return_value.status_code = 500
    session.request.return_value.json.return_value = {"message": "Database error"}
    store = EmployeeStore(session)

    result = store.fetch_employees()

    assert result is None
    assert store.error == "Database error"
    assert store.employees == []
    assert store.status["fetch_employees"].loading is False


def test_fetch_employee_sets_current(store, make_employee):
    created = make_employee()

    employee = store.fetch_employee(created["_id"])

    assert employee.id == created["_id"]
    assert store.current_employee == employee
    assert employee.insurance.member_id == "M-42"


def test_fetch_employee_failure_keeps_current(store, make_employee):
    """
    Test: Fetch an unknown id after a successful fetch
    Confirm: Raises with the server's message, current employee unchanged
    """
    created = make_employee()
    current = store.fetch_employee(created["_id"])

    with pytest.raises(EmployeeStoreError) as exc_info:
        store.fetch_employee("missing")

    assert str(exc_info.value) == "Employee not found"
    assert exc_info.value.status_code == 404
    assert store.current_employee == current
    assert store.error == "Employee not found"


def test_create_employee_prepends(store, make_employee, sample_employee_data):
    make_employee(name="Existing")
    store.fetch_employees()

    created = store.create_employee({**sample_employee_data, "_id": "ignored"})

    assert created.id != "ignored"
    assert store.employees[0] == created
    assert len(store.employees) == 2
    assert [e.id for e in store.employees].count(created.id) == 1


def test_create_employee_failure_raises(store, sample_employee_data):
    with pytest.raises(EmployeeStoreError) as exc_info:
        store.create_employee({**sample_employee_data, "bloodGroup": "Z+"})

    assert "bloodGroup" in exc_info.value.message
    assert store.employees == []
    assert store.error == exc_info.value.message


def test_update_employee_replaces_in_place(store, make_employee):
    a = make_employee(name="A")
    make_employee(name="B")
    store.fetch_employees()
    position = [e.id for e in store.employees].index(a["_id"])

    updated = store.update_employee(a["_id"], EmployeeUpdate(notes="Updated"))

    assert store.employees[position] == updated
    assert updated.notes == "Updated"
    assert updated.name == "A"
    assert updated.allergies == ["Penicillin", "Peanuts"]


def test_update_employee_with_dict(store, make_employee):
    created = make_employee()
    store.fetch_employees()

    updated = store.update_employee(created["_id"], {"bloodGroup": "AB-"})

    assert updated.blood_group == "AB-"
    assert store.employees[0].blood_group == "AB-"


def test_delete_employee(store, make_employee):
    first = make_employee(name="A")
    second = make_employee(name="B")
    third = make_employee(name="C")
    store.fetch_employees()

    store.delete_employee(second["_id"])

    assert [e.id for e in store.employees] == [third["_id"], first["_id"]]


def test_delete_employee_failure_raises(store):
    with pytest.raises(EmployeeStoreError, match="Employee not found"):
        store.delete_employee("missing")


def test_generate_qr_code_leaves_state_alone(store, make_employee):
    created = make_employee()
    store.fetch_employees()
    before = list(store.employees)

    data_url = store.generate_qr_code(created["_id"])

    assert data_url.startswith("data:image/png;base64,")
    assert store.employees == before
    assert store.current_employee is None


def test_network_error_uses_fallback_message():
    """
    Test: Request never completes
    Confirm: Generic per-operation message is raised and recorded
    """
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("connection refused")
    store = EmployeeStore(session, base_url="http://localhost:5000/api/")

    with pytest.raises(EmployeeStoreError, match="Failed to generate QR code"):
        store.generate_qr_code("abc")

    session.request.assert_called_once_with("GET", "http://localhost:5000/api/employees/abc/qr")
    assert store.error == "Failed to generate QR code"


def test_error_without_message_uses_fallback():
    session = MagicMock()
    session.request.return_value.status_code = 502
    session.request.return_value.json.side_effect = ValueError("no json")
    store = EmployeeStore(session)

    with pytest.raises(EmployeeStoreError, match="Failed to update employee"):
        store.update_employee("abc", {"notes": "x"})


def test_timeout_is_passed_to_session():
    session = MagicMock()
    session.request.return_value.status_code = 200
    session.request.return_value.json.return_value = {"data": []}
    store = EmployeeStore(session, timeout=5)

    store.fetch_employees()

    assert session.request.call_args.kwargs["timeout"] == 5


def test_error_reflects_last_settled_operation(store, make_employee):
    """
    Test: A failure followed by a success in another operation
    Confirm: Summary error follows the last operation; per-operation status keeps its own
    """
    created = make_employee()
    with pytest.raises(EmployeeStoreError):
        store.fetch_employee("missing")

    store.generate_qr_code(created["_id"])

    assert store.error is None
    assert store.status["fetch_employee"].error == "Employee not found"
    assert store.status["generate_qr_code"].error is None


def test_fetch_employees_non_list_data_is_silent():
    """
    Test: Server answers 200 but data is not a list
    Confirm: Treated as a failed list fetch, nothing raised
    """
    session = MagicMock()
    session.request.return_value.status_code = 200
    session.request.return_value.json.return_value = {"data": None}
    store = EmployeeStore(session)

    result = store.fetch_employees()

    assert result is None
    assert store.error == "Failed to fetch employees"
    assert store.employees == []
