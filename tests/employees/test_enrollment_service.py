import pytest

from src.face_attendance.face_attendance.biometrics.extractor import NO_FACE
from src.face_attendance.face_attendance.core.exceptions import (
    Conflict,
    DuplicateEmployeeCode,
    ExtractionUnavailable,
    InternalError,
    NoFaceDetected,
    StoreError,
    ValidationError,
)
from src.face_attendance.face_attendance.employees.service import (
    CompensationStack,
    EmployeeService,
    EnrollmentRequest,
    EnrollmentService,
)

from conftest import FakeExtractor, InMemoryCredentials


def _request(**overrides):
    data = dict(
        email="Grace@Example.com",
        password="secret1",
        employee_code="EMP100",
        first_name="Grace",
        last_name="Hopper",
        image=b"face",
    )
    data.update(overrides)
    return EnrollmentRequest(**data)


def test_enroll_creates_credential_and_employee(employees, credentials, extractor):
    emp = EnrollmentService(employees, credentials, extractor).enroll(_request())

    assert emp.email == "grace@example.com"
    assert emp.is_registered
    assert employees.get_embedding(emp.employee_id) is not None
    cred = credentials.rows[emp.auth_uid]
    assert cred["employee_id"] == emp.employee_id
    assert cred["metadata"]["employee_code"] == "EMP100"


def test_enroll_without_image_is_not_registered(employees, credentials, extractor):
    emp = EnrollmentService(employees, credentials, extractor).enroll(_request(image=None))
    assert not emp.is_registered
    assert employees.get_embedding(emp.employee_id) is None
    assert extractor.calls == []


def test_short_password_is_rejected_before_any_write(employees, credentials, extractor):
    with pytest.raises(ValidationError):
        EnrollmentService(employees, credentials, extractor).enroll(_request(password="123"))
    assert credentials.rows == {}


def test_duplicate_employee_code_is_rejected(employees, credentials, extractor):
    employees.add(employee_code="EMP100")
    with pytest.raises(DuplicateEmployeeCode):
        EnrollmentService(employees, credentials, extractor).enroll(_request())
    assert credentials.rows == {}


def test_duplicate_email_is_conflict(employees, credentials, extractor):
    service = EnrollmentService(employees, credentials, extractor)
    service.enroll(_request())
    with pytest.raises(Conflict):
        service.enroll(_request(employee_code="EMP101"))


def test_no_face_removes_credential(employees, credentials):
    service = EnrollmentService(employees, credentials, FakeExtractor(default=NO_FACE))
    with pytest.raises(NoFaceDetected):
        service.enroll(_request())

    assert credentials.rows == {}
    assert employees.count_employees() == 0


def test_model_unavailable_removes_credential(employees, credentials):
    service = EnrollmentService(employees, credentials, FakeExtractor(default=ExtractionUnavailable()))
    with pytest.raises(ExtractionUnavailable):
        service.enroll(_request())
    assert credentials.rows == {}


def test_employee_insert_failure_removes_credential(employees, credentials, extractor):
    employees.fail_create = StoreError("insert failed")
    with pytest.raises(InternalError):
        EnrollmentService(employees, credentials, extractor).enroll(_request())
    assert credentials.rows == {}


def test_compensation_runs_in_reverse_order(employees, extractor):
    calls = []
    credentials = InMemoryCredentials(calls)
    credentials.fail_attach = StoreError("link failed")
    real_delete = employees.delete_by_id

    def delete_employee(employee_id):
        calls.append(f"delete employee {employee_id}")
        return real_delete(employee_id)

    employees.delete_by_id = delete_employee

    with pytest.raises(InternalError):
        EnrollmentService(employees, credentials, extractor).enroll(_request())

    assert calls == ["delete employee 1", "delete credential cred-1"]
    assert employees.count_employees() == 0
    assert credentials.rows == {}


def test_compensation_failure_does_not_mask_original_error(employees, credentials, extractor):
    credentials.fail_attach = StoreError("link failed")
    employees.fail_delete = StoreError("delete failed")

    with pytest.raises(InternalError, match="Failed to link credential"):
        EnrollmentService(employees, credentials, extractor).enroll(_request())

    # The credential undo still ran after the employee undo failed.
    assert employees.deleted == [1]
    assert credentials.rows == {}


def test_compensation_stack_is_lifo_and_keeps_going():
    order = []
    stack = CompensationStack()
    stack.push("first", lambda: order.append("first"))
    stack.push("broken", lambda: 1 / 0)
    stack.push("last", lambda: order.append("last"))

    stack.unwind()

    assert order == ["last", "first"]
    assert len(stack) == 0


def test_list_employees(employees):
    employees.add("A", "One")
    employees.add("B", "Two")
    names = [e.first_name for e in EmployeeService(employees).list_employees()]
    assert names == ["A", "B"]
