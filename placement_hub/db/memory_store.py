"""
In-memory store - id-keyed tables for every aggregate.

This is the live working set. Aggregates reference each other through
ids; the placement service resolves ids to live objects inside a single
call. The tables also implement the read ports the domain asks questions
through (active applications, confirmed placement, active postings).

Iteration order is insertion order, so listings are stable.
"""

from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from placement_hub.core.errors import IllegalStateError, NotFoundError
from placement_hub.models.application import InternshipApplication
from placement_hub.models.enums import InternshipStatus
from placement_hub.models.ids import SequenceIdGenerator
from placement_hub.models.internship import Internship
from placement_hub.models.users import CareerCenterStaff, CompanyRep, Student
from placement_hub.models.withdrawal import WithdrawalRequest

T = TypeVar("T")


class Table(Generic[T]):
    """Insertion-ordered dict keyed by the entity's id."""

    def __init__(self, label: str, key: Callable[[T], str]):
        self.label = label
        self._key = key
        self._rows: Dict[str, T] = {}

    def get(self, entity_id: str) -> Optional[T]:
        return self._rows.get(entity_id)

    def require(self, entity_id: str) -> T:
        row = self._rows.get(entity_id)
        if row is None:
            raise NotFoundError(f"{self.label} not found: {entity_id}", {"id": entity_id})
        return row

    def add(self, entity: T) -> T:
        """Insert a new row; an id that is already taken is refused."""
        entity_id = self._key(entity)
        if entity_id in self._rows:
            raise IllegalStateError(f"{self.label} already exists: {entity_id}", {"id": entity_id})
        self._rows[entity_id] = entity
        return entity

    def put(self, entity: T) -> T:
        self._rows[self._key(entity)] = entity
        return entity

    def delete(self, entity_id: str) -> None:
        self._rows.pop(entity_id, None)

    def all(self) -> List[T]:
        return list(self._rows.values())

    def ids(self) -> List[str]:
        return list(self._rows.keys())

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._rows.values()))

    def __len__(self) -> int:
        return len(self._rows)


# ============================================================
# AGGREGATE TABLES
# ============================================================

class InternshipTable(Table[Internship]):
    """Also serves as the posting read port."""

    def __init__(self):
        super().__init__("Internship", lambda i: i.internship_id)

    def find_by_company(self, company_name: str) -> List[Internship]:
        wanted = (company_name or "").casefold()
        return [i for i in self if i.company_name.casefold() == wanted]

    def find_by_status(self, status: InternshipStatus) -> List[Internship]:
        return [i for i in self if i.status == status]

    def count_active_postings(self, company_name: str) -> int:
        return sum(
            1 for i in self.find_by_company(company_name)
            if i.status in (InternshipStatus.PENDING, InternshipStatus.APPROVED)
        )


class ApplicationTable(Table[InternshipApplication]):
    """Also serves as the application read port."""

    def __init__(self):
        super().__init__("Application", lambda a: a.application_id)

    def find_by_student(self, student_id: str) -> List[InternshipApplication]:
        if student_id is None:
            return []
        return [a for a in self if a.student_id == student_id]

    def find_by_internship(self, internship_id: str) -> List[InternshipApplication]:
        if internship_id is None:
            return []
        return [a for a in self if a.internship_id == internship_id]

    def exists_for(self, student_id: str, internship_id: str) -> bool:
        if student_id is None or internship_id is None:
            return False
        return any(a.internship_id == internship_id for a in self.find_by_student(student_id))

    def count_active_applications(self, student_id: str) -> int:
        return sum(1 for a in self.find_by_student(student_id) if a.is_active())

    def has_confirmed_placement(self, student_id: str) -> bool:
        return any(a.is_confirmed_placement() for a in self.find_by_student(student_id))


class WithdrawalTable(Table[WithdrawalRequest]):

    def __init__(self):
        super().__init__("Withdrawal request", lambda w: w.request_id)

    def find_by_application(self, application_id: str) -> List[WithdrawalRequest]:
        return [w for w in self if w.application.application_id == application_id]

    def find_pending_for_application(self, application_id: str) -> Optional[WithdrawalRequest]:
        for w in self.find_by_application(application_id):
            if w.is_pending():
                return w
        return None

    def find_by_student(self, student_id: str) -> List[WithdrawalRequest]:
        return [w for w in self if w.requested_by.student_id == student_id]

    def find_pending(self) -> List[WithdrawalRequest]:
        return [w for w in self if w.is_pending()]


# ============================================================
# STORE
# ============================================================

class MemoryStore:
    """
    Every table plus the id generators that feed them.

    Usage:
        store = MemoryStore()
        internship = Internship(new_id=store.internship_ids, ...)
        store.internships.add(internship)
    """

    def __init__(self):
        self.students: Table[Student] = Table("Student", lambda s: s.student_id)
        self.reps: Table[CompanyRep] = Table("Company representative", lambda r: r.rep_id)
        self.staff: Table[CareerCenterStaff] = Table("Staff member", lambda s: s.staff_id)
        self.internships = InternshipTable()
        self.applications = ApplicationTable()
        self.withdrawals = WithdrawalTable()

        self.internship_ids = SequenceIdGenerator("INT")
        self.application_ids = SequenceIdGenerator("APP")
        self.withdrawal_ids = SequenceIdGenerator("WRQ")

    def id_generators(self):
        return (self.internship_ids, self.application_ids, self.withdrawal_ids)

    def replace_contents(self, other: "MemoryStore") -> None:
        """Take over every table of a fully built store; id counters only move forward."""
        self.students = other.students
        self.reps = other.reps
        self.staff = other.staff
        self.internships = other.internships
        self.applications = other.applications
        self.withdrawals = other.withdrawals
        for mine, theirs in zip(self.id_generators(), other.id_generators()):
            mine.advance_to(theirs.next_value)

    def counts(self) -> Dict[str, int]:
        return {
            "students": len(self.students),
            "reps": len(self.reps),
            "staff": len(self.staff),
            "internships": len(self.internships),
            "applications": len(self.applications),
            "withdrawals": len(self.withdrawals),
        }
