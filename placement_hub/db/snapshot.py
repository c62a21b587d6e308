"""
Snapshot persistence - save the in-memory store to SQL and load it back.

Loading restores aggregates exactly as they were saved, in the order they
were saved; creation-time checks (open window, eligibility, caps) are NOT
re-run. Rows are built into a fresh store first: if any row fails to load,
the error propagates and the live store is left untouched.

Re-attachment rules on load:
- Application -> Internship by the durable internship_id. If the
  internship no longer exists the handle stays detached, and acceptance
  operations on that application fail until it is re-attached.
- WithdrawalRequest -> Application by id. Requests whose application or
  student is gone are dropped with a warning.
"""

import logging
from typing import Dict

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from placement_hub.db.memory_store import MemoryStore
from placement_hub.db.tables import (
    ApplicationRow, CompanyRepRow, IdSequenceRow, InternshipRow, StaffRow, StudentRow, WithdrawalRequestRow,
)
from placement_hub.models.application import InternshipApplication
from placement_hub.models.internship import Internship
from placement_hub.models.users import CareerCenterStaff, CompanyRep, Student
from placement_hub.models.withdrawal import WithdrawalRequest

logger = logging.getLogger(__name__)

ROW_TYPES = (StudentRow, CompanyRepRow, StaffRow, InternshipRow, ApplicationRow, WithdrawalRequestRow,
             IdSequenceRow)


# ============================================================
# SAVE
# ============================================================

def save_snapshot(store: MemoryStore, db: Session) -> Dict[str, int]:
    """Replace every snapshot table with the current store contents."""
    for row_type in ROW_TYPES:
        db.execute(delete(row_type))

    for n, s in enumerate(store.students):
        db.add(StudentRow(load_order=n, student_id=s.student_id, name=s.name, major=s.major,
                          year_of_study=s.year_of_study, email=s.email))

    for n, r in enumerate(store.reps):
        db.add(CompanyRepRow(load_order=n, rep_id=r.rep_id, name=r.name, company_name=r.company_name,
                             department=r.department, position=r.position, email=r.email,
                             approved=r.approved, rejection_reason=r.rejection_reason))

    for n, st in enumerate(store.staff):
        db.add(StaffRow(load_order=n, staff_id=st.staff_id, name=st.name,
                        department=st.department, email=st.email))

    for n, i in enumerate(store.internships):
        db.add(InternshipRow(
            load_order=n,
            internship_id=i.internship_id, title=i.title, description=i.description,
            level=i.level.value, preferred_major=i.preferred_major,
            open_date=i.open_date, close_date=i.close_date, company_name=i.company_name,
            max_slots=i.max_slots, confirmed_slots=i.confirmed_slots,
            visible=i.visible, status=i.status.value,
        ))

    for n, a in enumerate(store.applications):
        db.add(ApplicationRow(
            load_order=n,
            application_id=a.application_id, student_id=a.student_id,
            internship_id=a.internship_id, applied_on=a.applied_on,
            status=a.status.value, student_accepted=a.student_accepted,
        ))

    for n, w in enumerate(store.withdrawals):
        db.add(WithdrawalRequestRow(
            load_order=n,
            request_id=w.request_id, application_id=w.application.application_id,
            requested_by=w.requested_by.student_id, requested_on=w.requested_on,
            reason=w.reason, status=w.status.value,
            processed_by=w.processed_by.staff_id if w.processed_by else None,
            processed_on=w.processed_on, staff_note=w.staff_note,
        ))

    for gen in store.id_generators():
        db.add(IdSequenceRow(prefix=gen.prefix, next_value=gen.next_value))

    db.flush()
    counts = store.counts()
    logger.info("Snapshot saved: %s", counts)
    return counts


# ============================================================
# LOAD
# ============================================================

def load_snapshot(store: MemoryStore, db: Session) -> Dict[str, int]:
    """Rebuild the store from the snapshot tables; on any error the store keeps its contents."""
    fresh = MemoryStore()

    for row in db.scalars(select(StudentRow).order_by(StudentRow.load_order)):
        fresh.students.put(Student(student_id=row.student_id, name=row.name, major=row.major,
                                   year_of_study=row.year_of_study, email=row.email))

    for row in db.scalars(select(CompanyRepRow).order_by(CompanyRepRow.load_order)):
        fresh.reps.put(CompanyRep(rep_id=row.rep_id, name=row.name, company_name=row.company_name,
                                  department=row.department, position=row.position, email=row.email,
                                  approved=row.approved, rejection_reason=row.rejection_reason or ""))

    for row in db.scalars(select(StaffRow).order_by(StaffRow.load_order)):
        fresh.staff.put(CareerCenterStaff(staff_id=row.staff_id, name=row.name,
                                          department=row.department, email=row.email))

    for row in db.scalars(select(InternshipRow).order_by(InternshipRow.load_order)):
        fresh.internships.put(Internship.restore(
            row.internship_id,
            title=row.title, description=row.description, level=row.level,
            preferred_major=row.preferred_major, open_date=row.open_date, close_date=row.close_date,
            company_name=row.company_name, max_slots=row.max_slots,
            confirmed_slots=row.confirmed_slots, visible=row.visible, status=row.status,
        ))

    for row in db.scalars(select(ApplicationRow).order_by(ApplicationRow.load_order)):
        student = fresh.students.get(row.student_id)
        if student is None:
            logger.warning("Skipping application %s: unknown student %s", row.application_id, row.student_id)
            continue
        app = InternshipApplication.restore(
            row.application_id, student, row.internship_id,
            applied_on=row.applied_on, status=row.status, student_accepted=row.student_accepted,
        )
        app.attach_internship(fresh.internships.get(row.internship_id))
        fresh.applications.put(app)

    for row in db.scalars(select(WithdrawalRequestRow).order_by(WithdrawalRequestRow.load_order)):
        app = fresh.applications.get(row.application_id)
        student = fresh.students.get(row.requested_by)
        if app is None or student is None:
            logger.warning("Skipping withdrawal request %s: application or student missing", row.request_id)
            continue
        fresh.withdrawals.put(WithdrawalRequest.restore(
            row.request_id, app, student,
            requested_on=row.requested_on, reason=row.reason, status=row.status,
            processed_by=fresh.staff.get(row.processed_by) if row.processed_by else None,
            processed_on=row.processed_on, staff_note=row.staff_note,
        ))

    sequences = {row.prefix: row.next_value for row in db.scalars(select(IdSequenceRow))}
    for gen in fresh.id_generators():
        if gen.prefix in sequences:
            gen.advance_to(sequences[gen.prefix])
    fresh.internship_ids.advance_past(fresh.internships.ids())
    fresh.application_ids.advance_past(fresh.applications.ids())
    fresh.withdrawal_ids.advance_past(fresh.withdrawals.ids())

    store.replace_contents(fresh)
    counts = store.counts()
    logger.info("Snapshot loaded: %s", counts)
    return counts
