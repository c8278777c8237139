from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ..biometrics.extractor import FaceExtractor, NoFaceFound
from ..common.validators import require_min_length, require_non_empty
from ..core.exceptions import (
    Conflict,
    DuplicateEmployeeCode,
    DuplicateRecordError,
    InternalError,
    NoFaceDetected,
    StoreError,
)
from .credential_repository import CredentialRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrollmentRequest:
    email: str
    password: str
    employee_code: str
    first_name: str = ""
    last_name: str = ""
    is_admin: bool = False
    image: Optional[bytes] = None


class CompensationStack:
    """Undo actions for saga steps that already committed.

    Actions run in reverse registration order. A failing action is logged and
    skipped so the remaining ones still run and the original error survives.
    """

    def __init__(self):
        self._actions: List[Tuple[str, Callable[[], object]]] = []

    def push(self, description: str, action: Callable[[], object]) -> None:
        self._actions.append((description, action))

    def __len__(self) -> int:
        return len(self._actions)

    def unwind(self) -> None:
        while self._actions:
            description, action = self._actions.pop()
            try:
                action()
                logger.warning("Compensated: %s", description)
            except Exception:
                logger.exception("Compensation failed: %s", description)


class EnrollmentService:
    """Use case: provision a new employee (credential + identity row + face template).

    The credential store and the employees table do not share a transaction,
    so each committed step registers its undo before the next one runs. A
    crash between creating the credential and compensating it can still
    leave an orphaned credential.
    """

    def __init__(self, employees: EmployeeRepository, credentials: CredentialRepository, extractor: FaceExtractor):
        self._employees = employees
        self._credentials = credentials
        self._extractor = extractor

    def enroll(self, request: EnrollmentRequest) -> Employee:
        email = require_non_empty(request.email, "Email").lower()
        employee_code = require_non_empty(request.employee_code, "Employee ID")
        password = require_min_length(request.password, "Password", 6)
        first_name = (request.first_name or "").strip()
        last_name = (request.last_name or "").strip()

        # Best effort only; the unique key on employee_code is the real guard.
        try:
            existing = self._employees.get_by_employee_code(employee_code)
        except StoreError as e:
            raise InternalError("Failed to check employee ID") from e
        if existing:
            raise DuplicateEmployeeCode()

        try:
            credential_uid = self._credentials.create_credential(
                email=email,
                password=password,
                metadata={
                    "first_name": first_name,
                    "last_name": last_name,
                    "employee_code": employee_code,
                    "is_admin": bool(request.is_admin),
                },
            )
        except DuplicateRecordError as e:
            raise Conflict("Email already registered") from e
        except StoreError as e:
            raise InternalError("Failed to create credential") from e

        undo = CompensationStack()
        undo.push(f"delete credential {credential_uid}", lambda: self._credentials.delete_credential(credential_uid))

        try:
            face_encoding = self._extract_template(request.image)

            try:
                employee = self._employees.create_employee(
                    auth_uid=credential_uid,
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    employee_code=employee_code,
                    is_admin=bool(request.is_admin),
                    is_registered=face_encoding is not None,
                    face_encoding=face_encoding,
                )
            except DuplicateRecordError as e:
                raise Conflict() from e
            except StoreError as e:
                raise InternalError("Failed to create employee") from e

            undo.push(f"delete employee {employee.employee_id}", lambda: self._employees.delete_by_id(employee.employee_id))

            try:
                linked = self._credentials.attach_employee(credential_uid=credential_uid, employee_id=employee.employee_id)
            except StoreError as e:
                raise InternalError("Failed to link credential") from e
            if not linked:
                raise InternalError("Credential disappeared during enrollment")
        except Exception as e:
            logger.warning("Enrollment of %s failed (%s); rolling back %d step(s)", employee_code, e, len(undo))
            undo.unwind()
            raise

        logger.info(
            "Enrolled employee %s (id=%s, registered=%s)", employee_code, employee.employee_id, employee.is_registered
        )
        return employee

    def _extract_template(self, image: Optional[bytes]) -> Optional[Tuple[float, ...]]:
        if not image:
            return None
        result = self._extractor.extract(image)
        if isinstance(result, NoFaceFound):
            raise NoFaceDetected("No face detected. Please try a clearer photo.")
        return tuple(float(v) for v in result)


class EmployeeService:
    """Use case: read-only employee administration."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self) -> Sequence[Employee]:
        try:
            return self._employees.list_all()
        except StoreError as e:
            raise InternalError("Failed to list employees") from e
