from __future__ import annotations

from typing import Protocol, Sequence

from .model import Employee, EmployeeFilter


class EmployeeRepository(Protocol):
    """Read-only view of the employee directory.

    Login-code lookups only ever return active employees; lookups by id or
    department/number also return inactive ones.
    """

    def lookup(self, criteria: EmployeeFilter) -> Sequence[Employee]:
        raise NotImplementedError
