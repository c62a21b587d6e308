"""
Placement service: cross-aggregate rules and the end-to-end scenarios.
"""

import threading
from datetime import timedelta

import pytest

from placement_hub.core.errors import (
    AuthorizationError, CapacityError, EligibilityError, IllegalStateError, InvalidArgumentError,
    LimitReachedError, NotFoundError,
)
from placement_hub.models.enums import (
    ApplicationStatus, InternshipLevel, InternshipStatus, WithdrawalRequestStatus,
)

from tests.conftest import TODAY


def offer(service, rep, student_id, internship):
    """Apply and have the rep mark the application SUCCESSFUL."""
    app = service.apply_for_internship(student_id, internship.internship_id)
    service.mark_application_successful(rep.rep_id, app.application_id)
    return app


class TestScenarios:

    def test_a_accept_fills_single_slot(self, service, rep, post_internship):
        internship = post_internship(max_slots=1)
        service.register_student("S001", "Xavier", "Computer Science", 3)

        app = service.apply_for_internship("S001", internship.internship_id)
        assert app.status == ApplicationStatus.PENDING

        service.mark_application_successful(rep.rep_id, app.application_id)
        service.confirm_acceptance("S001", app.application_id)

        assert internship.confirmed_slots == 1
        assert internship.status == InternshipStatus.FILLED
        assert app.student_accepted is True

    def test_b_accepting_withdraws_other_applications(self, service, rep, post_internship):
        service.register_student("S001", "Xavier", "Computer Science", 3)
        target, other1, other2 = (post_internship(title=f"Role {n}") for n in range(3))

        app = offer(service, rep, "S001", target)
        pending1 = service.apply_for_internship("S001", other1.internship_id)
        pending2 = service.apply_for_internship("S001", other2.internship_id)

        service.confirm_acceptance("S001", app.application_id)

        assert pending1.status == ApplicationStatus.WITHDRAWN
        assert pending2.status == ApplicationStatus.WITHDRAWN
        assert app.status == ApplicationStatus.SUCCESSFUL
        assert service.application_summary("S001")["active_applications"] == 0

    def test_b_unaccepted_offers_are_withdrawn_too(self, service, rep, post_internship):
        service.register_student("S001", "Xavier", "Computer Science", 3)
        first = offer(service, rep, "S001", post_internship(title="A"))
        second = offer(service, rep, "S001", post_internship(title="B"))
        rejected = service.apply_for_internship("S001", post_internship(title="C").internship_id)
        service.mark_application_unsuccessful(rep.rep_id, rejected.application_id)

        service.confirm_acceptance("S001", first.application_id)

        assert second.status == ApplicationStatus.WITHDRAWN
        assert rejected.status == ApplicationStatus.UNSUCCESSFUL

    def test_c_second_acceptance_on_full_internship(self, service, rep, post_internship):
        internship = post_internship(max_slots=1)
        service.register_student("S001", "Xavier", "Computer Science", 3)
        service.register_student("S002", "Yuki", "Computer Science", 4)
        first = offer(service, rep, "S001", internship)
        second = offer(service, rep, "S002", internship)
        elsewhere = service.apply_for_internship("S002", post_internship(title="Other").internship_id)

        service.confirm_acceptance("S001", first.application_id)
        with pytest.raises(CapacityError):
            service.confirm_acceptance("S002", second.application_id)

        assert internship.confirmed_slots == 1
        assert internship.status == InternshipStatus.FILLED
        assert second.student_accepted is False
        # failed acceptance must not auto-withdraw anything
        assert elsewhere.status == ApplicationStatus.PENDING

    def test_d_approved_withdrawal_frees_the_slot(self, service, rep, staff, post_internship):
        internship = post_internship(max_slots=1)
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = offer(service, rep, "S001", internship)
        service.confirm_acceptance("S001", app.application_id)

        request = service.request_withdrawal("S001", app.application_id, "Relocating")
        service.approve_withdrawal(staff.staff_id, request.request_id)

        assert internship.confirmed_slots == 0
        assert internship.status == InternshipStatus.APPROVED
        assert app.student_accepted is False
        assert app.status == ApplicationStatus.SUCCESSFUL
        assert request.staff_note == "Approved by Career Center staff"

    def test_e_sixth_posting_refused(self, service, rep):
        for n in range(5):
            service.create_internship(
                rep.rep_id, title=f"Role {n}", description="d", level="BASIC",
                preferred_major="CS", open_date=TODAY, close_date=TODAY + timedelta(days=10), max_slots=1,
            )
        next_id = service.store.internship_ids.peek()

        with pytest.raises(LimitReachedError):
            service.create_internship(
                rep.rep_id, title="Role 6", description="d", level="BASIC",
                preferred_major="CS", open_date=TODAY, close_date=TODAY + timedelta(days=10), max_slots=1,
            )

        assert len(service.list_company_internships(rep.rep_id)) == 5
        assert service.store.internship_ids.peek() == next_id

    def test_f_year_one_cannot_apply_advanced(self, service, post_internship):
        internship = post_internship(level="ADVANCED")
        service.register_student("S001", "Xavier", "Computer Science", 1)

        with pytest.raises(EligibilityError):
            service.apply_for_internship("S001", internship.internship_id)

        assert service.list_my_applications("S001") == []
        assert len(service.store.applications) == 0


class TestPostingCap:

    def test_rejected_and_filled_postings_do_not_count(self, service, rep, staff, post_internship):
        filled = post_internship(max_slots=1)
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = offer(service, rep, "S001", filled)
        service.confirm_acceptance("S001", app.application_id)

        for n in range(4):
            post_internship(title=f"Role {n}")
        rejected = service.create_internship(
            rep.rep_id, title="Rejected", description="d", level="BASIC",
            preferred_major="CS", open_date=TODAY, close_date=TODAY, max_slots=1,
        )
        service.reject_internship(staff.staff_id, rejected.internship_id)

        # FILLED + REJECTED + 4 APPROVED: one more is still allowed
        post_internship(title="Fifth active")
        with pytest.raises(LimitReachedError):
            post_internship(title="Sixth active")

    def test_cap_is_per_company_name(self, service, staff, rep, post_internship):
        colleague = service.register_company_rep("ops@ACME.com", "Bob", "ACME", "Ops", "Lead")
        service.approve_company_rep(staff.staff_id, colleague.rep_id)
        for n in range(3):
            post_internship(title=f"Alice {n}")
        for n in range(2):
            post_internship(title=f"Bob {n}", by=colleague)
        with pytest.raises(LimitReachedError):
            post_internship(by=colleague)


class TestGuards:

    def test_duplicate_application_refused(self, service, post_internship):
        internship = post_internship(max_slots=3)
        service.register_student("S001", "Xavier", "Computer Science", 3)
        service.apply_for_internship("S001", internship.internship_id)

        with pytest.raises(IllegalStateError, match="already applied"):
            service.apply_for_internship("S001", internship.internship_id)
        assert len(service.store.applications) == 1

    def test_duplicate_guard_survives_withdrawal(self, service, staff, post_internship):
        internship = post_internship(max_slots=3)
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = service.apply_for_internship("S001", internship.internship_id)
        request = service.request_withdrawal("S001", app.application_id, "Oops")
        service.approve_withdrawal(staff.staff_id, request.request_id)

        with pytest.raises(IllegalStateError):
            service.apply_for_internship("S001", internship.internship_id)

    def test_single_pending_withdrawal(self, service, staff, post_internship):
        internship = post_internship()
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = service.apply_for_internship("S001", internship.internship_id)
        first = service.request_withdrawal("S001", app.application_id, "Reason one")

        with pytest.raises(IllegalStateError, match="pending withdrawal"):
            service.request_withdrawal("S001", app.application_id, "Reason two")

        service.reject_withdrawal(staff.staff_id, first.request_id, "Please reconsider")
        second = service.request_withdrawal("S001", app.application_id, "Reason two")
        assert second.status == WithdrawalRequestStatus.PENDING
        assert [w.request_id for w in service.list_my_withdrawals("S001")] == [
            first.request_id, second.request_id,
        ]

    def test_blank_withdrawal_reason_refused(self, service, post_internship):
        internship = post_internship()
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = service.apply_for_internship("S001", internship.internship_id)
        with pytest.raises(InvalidArgumentError):
            service.request_withdrawal("S001", app.application_id, "   ")
        assert service.list_pending_withdrawals() == []

    def test_application_cap(self, service, post_internship):
        service.register_student("S001", "Xavier", "Computer Science", 3)
        for n in range(3):
            service.apply_for_internship("S001", post_internship(title=f"Role {n}").internship_id)
        with pytest.raises(LimitReachedError):
            service.apply_for_internship("S001", post_internship(title="Role 4").internship_id)
        summary = service.application_summary("S001")
        assert summary["active_applications"] == 3
        assert summary["can_apply_more"] is False

    def test_at_most_one_accepted_application(self, service, rep, post_internship):
        service.register_student("S001", "Xavier", "Computer Science", 3)
        first = offer(service, rep, "S001", post_internship(title="A"))
        second = offer(service, rep, "S001", post_internship(title="B"))
        service.confirm_acceptance("S001", first.application_id)

        with pytest.raises(IllegalStateError):
            service.confirm_acceptance("S001", second.application_id)
        accepted = [a for a in service.list_my_applications("S001") if a.student_accepted]
        assert accepted == [first]

    def test_concurrent_acceptances_fill_exactly_once(self, service, rep, post_internship):
        internship = post_internship(max_slots=1)
        apps = []
        for n in range(8):
            student_id = f"S{n:03d}"
            service.register_student(student_id, f"Student {n}", "CS", 3)
            apps.append(offer(service, rep, student_id, internship))

        errors = []

        def accept(app):
            try:
                service.confirm_acceptance(app.student_id, app.application_id)
            except CapacityError as exc:
                errors.append(exc)

        threads = [threading.Thread(target=accept, args=(a,)) for a in apps]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert internship.confirmed_slots == 1
        assert len(errors) == 7
        assert sum(1 for a in apps if a.student_accepted) == 1


class TestOwnership:

    @pytest.fixture
    def rival(self, service, staff):
        rival = service.register_company_rep("hr@globex.com", "Hank", "Globex", "HR", "Recruiter")
        service.approve_company_rep(staff.staff_id, rival.rep_id)
        return rival

    def test_rep_cannot_manage_other_company_posting(self, service, rival, post_internship):
        internship = post_internship()
        with pytest.raises(AuthorizationError):
            service.set_internship_visibility(rival.rep_id, internship.internship_id, False)
        with pytest.raises(AuthorizationError):
            service.list_internship_applications(rival.rep_id, internship.internship_id)
        assert internship.visible is True

    def test_rep_cannot_decide_other_company_application(self, service, rival, post_internship):
        internship = post_internship()
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = service.apply_for_internship("S001", internship.internship_id)
        with pytest.raises(AuthorizationError):
            service.mark_application_successful(rival.rep_id, app.application_id)
        assert app.status == ApplicationStatus.PENDING

    def test_student_cannot_act_on_other_students_application(self, service, rep, post_internship):
        service.register_student("S001", "Xavier", "Computer Science", 3)
        service.register_student("S002", "Yuki", "Computer Science", 3)
        app = offer(service, rep, "S001", post_internship())

        with pytest.raises(AuthorizationError):
            service.confirm_acceptance("S002", app.application_id)
        with pytest.raises(AuthorizationError):
            service.request_withdrawal("S002", app.application_id, "Not mine")
        with pytest.raises(AuthorizationError):
            service.get_my_application("S002", app.application_id)
        assert app.student_accepted is False

    def test_student_cannot_edit_other_students_withdrawal(self, service, post_internship):
        service.register_student("S001", "Xavier", "Computer Science", 3)
        service.register_student("S002", "Yuki", "Computer Science", 3)
        app = service.apply_for_internship("S001", post_internship().internship_id)
        request = service.request_withdrawal("S001", app.application_id, "Original")
        with pytest.raises(AuthorizationError):
            service.update_withdrawal_reason("S002", request.request_id, "Hijacked")
        assert request.reason == "Original"


class TestCompanyRepWorkflow:

    def test_unapproved_rep_cannot_post(self, service):
        rep = service.register_company_rep("new@initech.com", "Pat", "Initech", "HR", "Recruiter")
        assert service.list_pending_reps() == [rep]
        with pytest.raises(IllegalStateError, match="not approved"):
            service.create_internship(
                rep.rep_id, title="t", description="d", level="BASIC",
                preferred_major="CS", open_date=TODAY, close_date=TODAY, max_slots=1,
            )

    def test_rep_email_is_case_insensitive_id(self, service, staff):
        rep = service.register_company_rep("HR@Initech.com", "Pat", "Initech", "HR", "Recruiter")
        assert rep.rep_id == "hr@initech.com"
        assert service.get_company_rep("Hr@INITECH.com") is rep
        with pytest.raises(IllegalStateError):
            service.register_company_rep("hr@initech.com", "Pat", "Initech", "HR", "Recruiter")

    def test_reject_rep(self, service, staff):
        rep = service.register_company_rep("new@initech.com", "Pat", "Initech", "HR", "Recruiter")
        service.reject_company_rep(staff.staff_id, rep.rep_id, None)
        assert rep.is_rejected is True
        assert rep.rejection_reason == "Rejected by Career Center staff"
        assert service.list_pending_reps() == []
        with pytest.raises(IllegalStateError):
            service.reject_company_rep(staff.staff_id, rep.rep_id, "again")

    def test_unknown_rep(self, service):
        with pytest.raises(NotFoundError):
            service.get_company_rep("nobody@nowhere.com")

    def test_edit_pending_posting_reissues_id(self, service, rep):
        original = service.create_internship(
            rep.rep_id, title="Draft", description="d", level="BASIC",
            preferred_major="CS", open_date=TODAY, close_date=TODAY, max_slots=1,
        )
        edited = service.edit_internship(
            rep.rep_id, original.internship_id, title="Final", description="d2", level="ADVANCED",
            preferred_major="CS", open_date=TODAY, close_date=TODAY + timedelta(days=5), max_slots=4,
        )
        assert edited.internship_id != original.internship_id
        assert edited.title == "Final"
        assert edited.level == InternshipLevel.ADVANCED
        assert edited.status == InternshipStatus.PENDING
        assert service.store.internships.get(original.internship_id) is None

    def test_invalid_edit_keeps_original(self, service, rep):
        original = service.create_internship(
            rep.rep_id, title="Draft", description="d", level="BASIC",
            preferred_major="CS", open_date=TODAY, close_date=TODAY, max_slots=1,
        )
        with pytest.raises(InvalidArgumentError):
            service.edit_internship(
                rep.rep_id, original.internship_id, title="Final", description="d", level="BASIC",
                preferred_major="CS", open_date=TODAY, close_date=TODAY - timedelta(days=1), max_slots=1,
            )
        assert service.store.internships.get(original.internship_id) is original

    def test_approved_posting_is_permanent(self, service, post_internship, rep):
        internship = post_internship()
        with pytest.raises(IllegalStateError):
            service.edit_internship(
                rep.rep_id, internship.internship_id, title="x", description="d", level="BASIC",
                preferred_major="CS", open_date=TODAY, close_date=TODAY, max_slots=1,
            )
        with pytest.raises(IllegalStateError):
            service.delete_internship(rep.rep_id, internship.internship_id)
        assert service.store.internships.get(internship.internship_id) is internship

    def test_delete_rejected_posting(self, service, rep, staff):
        internship = service.create_internship(
            rep.rep_id, title="Draft", description="d", level="BASIC",
            preferred_major="CS", open_date=TODAY, close_date=TODAY, max_slots=1,
        )
        service.reject_internship(staff.staff_id, internship.internship_id)
        service.delete_internship(rep.rep_id, internship.internship_id)
        assert service.list_company_internships(rep.rep_id) == []

    def test_visibility_toggle_hides_from_students(self, service, rep, post_internship):
        internship = post_internship()
        service.register_student("S001", "Xavier", "Computer Science", 3)
        service.set_internship_visibility(rep.rep_id, internship.internship_id, False)
        assert service.list_eligible_internships("S001") == []
        with pytest.raises(IllegalStateError):
            service.apply_for_internship("S001", internship.internship_id)


class TestStaffWorkflow:

    def test_staff_decisions_only_on_pending_postings(self, service, staff, post_internship):
        internship = post_internship()
        with pytest.raises(IllegalStateError):
            service.reject_internship(staff.staff_id, internship.internship_id)
        with pytest.raises(IllegalStateError):
            service.approve_internship(staff.staff_id, internship.internship_id, True)

    def test_approve_without_visibility(self, service, staff, rep):
        internship = service.create_internship(
            rep.rep_id, title="Draft", description="d", level="BASIC",
            preferred_major="CS", open_date=TODAY, close_date=TODAY, max_slots=1,
        )
        assert service.list_pending_internships() == [internship]
        service.approve_internship(staff.staff_id, internship.internship_id, False)
        assert internship.status == InternshipStatus.APPROVED
        assert internship.visible is False
        assert service.list_all_internships("approved") == [internship]

    def test_list_all_internships_rejects_unknown_status(self, service):
        with pytest.raises(InvalidArgumentError):
            service.list_all_internships("ARCHIVED")

    def test_unknown_staff_cannot_decide(self, service, post_internship):
        internship = post_internship()
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = service.apply_for_internship("S001", internship.internship_id)
        request = service.request_withdrawal("S001", app.application_id, "Reason")
        with pytest.raises(NotFoundError):
            service.approve_withdrawal("NOBODY", request.request_id)
        assert request.is_pending()

    def test_reject_withdrawal_default_note(self, service, staff, post_internship):
        internship = post_internship()
        service.register_student("S001", "Xavier", "Computer Science", 3)
        app = service.apply_for_internship("S001", internship.internship_id)
        request = service.request_withdrawal("S001", app.application_id, "Reason")
        service.reject_withdrawal(staff.staff_id, request.request_id)
        assert request.status == WithdrawalRequestStatus.REJECTED
        assert request.staff_note == "Rejected by Career Center staff"
        assert app.status == ApplicationStatus.PENDING


class TestStudentQueries:

    def test_eligible_listing_respects_year(self, service, post_internship):
        basic = post_internship(level="BASIC", title="Basic")
        post_internship(level="ADVANCED", title="Advanced")
        service.register_student("S001", "Xavier", "Computer Science", 2)
        assert service.list_eligible_internships("S001") == [basic]

    def test_applied_internship_stays_listed_after_filling(self, service, rep, post_internship):
        internship = post_internship(max_slots=1)
        service.register_student("S001", "Xavier", "Computer Science", 3)
        service.register_student("S002", "Yuki", "Computer Science", 3)
        service.apply_for_internship("S002", internship.internship_id)
        app = offer(service, rep, "S001", internship)
        service.confirm_acceptance("S001", app.application_id)

        assert internship.is_open_for_applications(TODAY) is False
        assert service.list_eligible_internships("S002") == [internship]

    def test_unknown_student(self, service):
        with pytest.raises(NotFoundError):
            service.list_my_applications("S404")
