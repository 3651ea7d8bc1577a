"""Adapter between the Flask session and the core.

The core never looks at cookies; it receives a verified (employee_id, role)
pair from here or the request fails as Unauthorized / Forbidden.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, MutableMapping, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError


@dataclass(frozen=True)
class Identity:
    employee_id: str
    role: Role
    name: str = ""


def store_identity(session: MutableMapping, identity: Identity) -> None:
    session["employee_id"] = identity.employee_id
    session["role"] = identity.role.value
    session["name"] = identity.name


def identity_from_session(
    session: MutableMapping,
    required_roles: Optional[Iterable[Role]] = None,
) -> Identity:
    employee_id = session.get("employee_id")
    role_s = session.get("role")
    if not employee_id or not role_s:
        raise AuthenticationError("Unauthorized")

    try:
        role = Role(role_s)
    except ValueError:
        raise AuthenticationError("Unauthorized")

    if required_roles is not None and role not in set(required_roles):
        raise AuthorizationError("Forbidden")

    return Identity(employee_id=str(employee_id), role=role, name=session.get("name") or "")
