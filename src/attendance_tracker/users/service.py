from __future__ import annotations

from typing import Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, DuplicateRecordError, ValidationError
from ..core.logging import get_logger
from .identity import Identity
from .model import Employee
from .repository import EmployeeRepository

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


class AuthService:
    """Use case: authenticate an employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> Identity:
        employee = self._employees.get_by_email(normalize_email(email))
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        logger.info("auth.login", employee_id=employee.employee_id, role=employee.role.value)
        return Identity(employee_id=employee.employee_id, role=employee.role, name=employee.name)


class EmployeeService:
    """Use case: manage employees (admin)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def create_employee(self, *, name: str, email: str, password: str) -> str:
        if not name or not email or not password:
            raise ValidationError("All fields are required")

        name = require_non_empty(name, "Name")
        email = normalize_email(require_non_empty(email, "Email"))
        if "@" not in email:
            raise ValidationError("Email is not valid")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._employees.get_by_email(email):
            raise ValidationError("Employee with this email already exists")

        try:
            employee_id = self._employees.create_employee(
                name=name,
                email=email,
                password_hash=generate_password_hash(password),
                role=Role.EMPLOYEE,
            )
        except DuplicateRecordError:
            raise ValidationError("Employee with this email already exists")

        logger.info("employees.created", employee_id=employee_id)
        return employee_id

    def list_active(self) -> Sequence[Employee]:
        return self._employees.list_active()
