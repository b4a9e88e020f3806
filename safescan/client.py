"""
Client-side mirror of the employee API.

`EmployeeStore` keeps the employee list and the currently viewed employee in
memory and updates them from the server's responses. Loading and error state
is tracked per operation in `store.status`, so one call finishing never
clobbers the state of another that is still running. `store.loading` and
`store.error` summarise it: something is in flight, and the error of the
operation that settled last.

The store is given its HTTP session and base URL explicitly; any
requests-compatible session works, including FastAPI's TestClient.
"""
import itertools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import requests
from pydantic import BaseModel, ValidationError
from pydantic_core import to_jsonable_python

from safescan.schemas import EmployeeCreate, EmployeeOut, EmployeeUpdate

logger = logging.getLogger(__name__)

Employee = EmployeeOut

DEFAULT_BASE_URL = "http://localhost:5000/api"


class EmployeeStoreError(Exception):
    """A store operation failed; the message is safe to show to a user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class OperationStatus:
    loading: bool = False
    error: Optional[str] = None
    settled_at: Optional[int] = None


class EmployeeStore:
    def __init__(self, session, base_url: str = DEFAULT_BASE_URL, timeout: Optional[float] = None):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.employees: List[Employee] = []
        self.current_employee: Optional[Employee] = None
        self.status: Dict[str, OperationStatus] = {}

        self._settle_counter = itertools.count(1)

    # ==================== Status =========================

    @property
    def loading(self) -> bool:
        return any(s.loading for s in self.status.values())

    @property
    def error(self) -> Optional[str]:
        settled = [s for s in self.status.values() if s.settled_at is not None]
        if not settled:
            return None
        return max(settled, key=lambda s: s.settled_at).error

    @contextmanager
    def _operation(self, name: str, fallback: str):
        status = self.status.setdefault(name, OperationStatus())
        status.loading = True
        status.error = None
        try:
            yield status
        except EmployeeStoreError as exc:
            status.error = exc.message
            logger.warning("%s failed: %s", name, exc.message)
            raise
        except ValidationError as exc:
            # server answered with something that is not an employee
            status.error = fallback
            logger.warning("%s returned malformed data: %s", name, exc)
            raise EmployeeStoreError(fallback) from exc
        finally:
            status.loading = False
            status.settled_at = next(self._settle_counter)

    # ==================== HTTP =========================

    def _request(self, method: str, path: str, fallback: str, **kwargs) -> Any:
        """Send a request and return the `data` part of the envelope."""
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        try:
            response = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        except requests.RequestException as exc:
            raise EmployeeStoreError(fallback) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            raise EmployeeStoreError(message or fallback, status_code=response.status_code)
        if not isinstance(body, dict) or "data" not in body:
            raise EmployeeStoreError(fallback, status_code=response.status_code)
        return body["data"]

    @staticmethod
    def _payload(data: Union[BaseModel, Dict[str, Any]], partial: bool = False) -> Dict[str, Any]:
        if isinstance(data, BaseModel):
            return data.model_dump(by_alias=True, mode="json", exclude_unset=partial, exclude_none=not partial)
        payload = to_jsonable_python(dict(data))
        # identifiers are always assigned by the server
        payload.pop("_id", None)
        payload.pop("id", None)
        return payload

    # ==================== Operations =========================

    def fetch_employees(self) -> None:
        """Replace the cached list with the server's. Failures are only recorded."""
        fallback = "Failed to fetch employees"
        try:
            with self._operation("fetch_employees", fallback):
                data = self._request("GET", "/employees", fallback)
                if not isinstance(data, list):
                    raise EmployeeStoreError(fallback)
                self.employees = [Employee.model_validate(item) for item in data]
        except EmployeeStoreError:
            return None

    def fetch_employee(self, employee_id: str) -> Employee:
        fallback = "Failed to fetch employee"
        with self._operation("fetch_employee", fallback):
            data = self._request("GET", f"/employees/{employee_id}", fallback)
            employee = Employee.model_validate(data)
            self.current_employee = employee
            return employee

    def create_employee(self, employee: Union[EmployeeCreate, Dict[str, Any]]) -> Employee:
        fallback = "Failed to create employee"
        with self._operation("create_employee", fallback):
            data = self._request("POST", "/employees", fallback, json=self._payload(employee))
            created = Employee.model_validate(data)
            self.employees = [created] + self.employees
            return created

    def update_employee(self, employee_id: str, changes: Union[EmployeeUpdate, Dict[str, Any]]) -> Employee:
        fallback = "Failed to update employee"
        with self._operation("update_employee", fallback):
            data = self._request(
                "PUT", f"/employees/{employee_id}", fallback, json=self._payload(changes, partial=True)
            )
            updated = Employee.model_validate(data)
            self.employees = [updated if e.id == employee_id else e for e in self.employees]
            return updated

    def delete_employee(self, employee_id: str) -> None:
        fallback = "Failed to delete employee"
        with self._operation("delete_employee", fallback):
            self._request("DELETE", f"/employees/{employee_id}", fallback)
            self.employees = [e for e in self.employees if e.id != employee_id]

    def generate_qr_code(self, employee_id: str) -> str:
        fallback = "Failed to generate QR code"
        with self._operation("generate_qr_code", fallback):
            data = self._request("GET", f"/employees/{employee_id}/qr", fallback)
            try:
                return data["qrCodeDataUrl"]
            except (KeyError, TypeError) as exc:
                raise EmployeeStoreError(fallback) from exc
