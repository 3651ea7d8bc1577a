from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object (no DB access code).
    """

    employee_id: str
    name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
