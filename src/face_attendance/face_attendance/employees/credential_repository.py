from __future__ import annotations

from typing import Optional, Protocol


class CredentialRepository(Protocol):
    """Gateway to the login/credential store.

    It lives outside the employees table's transactions; the enrollment saga
    compensates across the two by hand.
    """

    def create_credential(self, *, email: str, password: str, metadata: Optional[dict] = None) -> str:
        """Returns the new credential uid."""

        raise NotImplementedError

    def attach_employee(self, *, credential_uid: str, employee_id: int) -> bool:
        raise NotImplementedError

    def delete_credential(self, credential_uid: str) -> bool:
        raise NotImplementedError
