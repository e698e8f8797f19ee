from __future__ import annotations

import logging
from datetime import date, datetime

import pytest

from hrms.core.enums import AttendanceStatus, LeaveType, NotificationType, RequestStatus
from hrms.core.exceptions import AlreadyReviewed, InvalidRange, NotFound, ValidationError


@pytest.fixture
def service(container):
    return container.leave_service


def _sick_request(service, user_id="u1"):
    return service.submit(
        user_id=user_id,
        leave_type="sick",
        start_date=date(2024, 3, 10),
        end_date=date(2024, 3, 12),
        reason="Flu",
    )


def test_submit_creates_pending_request(service):
    req = _sick_request(service)

    assert req.status == RequestStatus.PENDING
    assert req.leave_type == LeaveType.SICK
    assert req.days == 3
    assert service.pending_count() == 1


def test_submit_validates_range_and_type(service):
    with pytest.raises(InvalidRange):
        service.submit(user_id="u1", leave_type="paid", start_date=date(2024, 3, 12), end_date=date(2024, 3, 10))
    with pytest.raises(ValidationError):
        service.submit(user_id="u1", leave_type="sabbatical", start_date=date(2024, 3, 1), end_date=date(2024, 3, 1))


def test_approve_deducts_balance_and_marks_leave_days(service, leave_balance_repo, attendance_repo, notifications_repo):
    leave_balance_repo.set("u1", sick_leave=5, paid_leave=12)
    req = _sick_request(service)

    approved = service.approve(req.id, reviewer_id="hr1", comment="Get well")

    assert approved.status == RequestStatus.APPROVED
    assert approved.reviewed_by == "hr1"
    assert approved.balance_applied is True
    assert service.get_balance("u1").sick_leave == 2
    assert service.get_balance("u1").paid_leave == 12
    for day in (date(2024, 3, 10), date(2024, 3, 11), date(2024, 3, 12)):
        assert attendance_repo.get_for_user_and_date("u1", day).status == AttendanceStatus.LEAVE

    [note] = notifications_repo.list_for_user("u1")
    assert note.title == "Leave Approved"
    assert note.type == NotificationType.SUCCESS


def test_approve_overwrites_status_of_existing_attendance(service, attendance_repo):
    attendance_repo.add("u1", date(2024, 3, 11), AttendanceStatus.ABSENT)
    req = _sick_request(service)

    service.approve(req.id, reviewer_id="hr1")

    assert len(attendance_repo.records) == 3
    assert attendance_repo.get_for_user_and_date("u1", date(2024, 3, 11)).status == AttendanceStatus.LEAVE


def test_reject_changes_neither_balance_nor_attendance(service, leave_balance_repo, attendance_repo, notifications_repo):
    leave_balance_repo.set("u1", sick_leave=5)
    req = _sick_request(service)

    rejected = service.reject(req.id, reviewer_id="hr1", comment="Busy week")

    assert rejected.status == RequestStatus.REJECTED
    assert rejected.review_comments == "Busy week"
    assert service.get_balance("u1").sick_leave == 5
    assert attendance_repo.records == {}

    [note] = notifications_repo.list_for_user("u1")
    assert note.type == NotificationType.ERROR
    assert "Busy week" in note.message


@pytest.mark.parametrize("first", ["approve", "reject"])
@pytest.mark.parametrize("second", ["approve", "reject"])
def test_reviewed_request_cannot_be_reviewed_again(service, leave_balance_repo, first, second):
    leave_balance_repo.set("u1", sick_leave=5)
    req = _sick_request(service)
    getattr(service, first)(req.id, reviewer_id="hr1")

    with pytest.raises(AlreadyReviewed):
        getattr(service, second)(req.id, reviewer_id="hr2")

    expected = 2 if first == "approve" else 5
    assert service.get_balance("u1").sick_leave == expected


def test_approve_unknown_request(service):
    with pytest.raises(NotFound):
        service.approve("missing", reviewer_id="hr1")


def test_insufficient_balance_is_clamped_at_zero(service, leave_balance_repo, caplog):
    leave_balance_repo.set("u1", sick_leave=1)
    req = _sick_request(service)

    with caplog.at_level(logging.WARNING, logger="hrms.leave.service"):
        service.approve(req.id, reviewer_id="hr1")

    assert service.get_balance("u1").sick_leave == 0
    assert "clamped" in caplog.text


def test_missing_balance_row_reads_as_zero(service):
    balance = service.get_balance("nobody")

    assert balance.to_dict() == {
        "user_id": "nobody",
        "paid_leave": 0,
        "sick_leave": 0,
        "casual_leave": 0,
        "unpaid_leave": 0,
    }


def test_unpaid_leave_uses_unpaid_counter(service, leave_balance_repo):
    leave_balance_repo.set("u1", unpaid_leave=4, paid_leave=10)
    req = service.submit(user_id="u1", leave_type="unpaid", start_date=date(2024, 3, 4), end_date=date(2024, 3, 5))

    service.approve(req.id, reviewer_id="hr1")

    assert service.get_balance("u1").unpaid_leave == 2
    assert service.get_balance("u1").paid_leave == 10


def test_notification_failure_does_not_undo_approval(service, leave_balance_repo, notifications_repo):
    leave_balance_repo.set("u1", sick_leave=5)
    notifications_repo.fail = True
    req = _sick_request(service)

    approved = service.approve(req.id, reviewer_id="hr1")

    assert approved.status == RequestStatus.APPROVED
    assert service.get_balance("u1").sick_leave == 2


def test_reconcile_finishes_interrupted_approval_once(service, leave_requests_repo, leave_balance_repo, attendance_repo):
    leave_balance_repo.set("u1", sick_leave=5)
    req = _sick_request(service)
    # Simulate a crash right after the status update.
    leave_requests_repo.decide(
        request_id=req.id,
        status=RequestStatus.APPROVED,
        reviewed_by="hr1",
        reviewed_at=None,
    )

    assert service.reconcile_approved(req.id) is True
    assert service.reconcile_approved(req.id) is False

    assert service.get_balance("u1").sick_leave == 2
    assert len(attendance_repo.records) == 3


def test_reconcile_requires_approved_request(service):
    req = _sick_request(service)

    with pytest.raises(ValidationError):
        service.reconcile_approved(req.id)


def test_list_requests_filters_by_status_and_search(service, profiles_repo, profile_factory):
    profiles_repo.add(profile_factory("u1", "Asha", "Rao"))
    profiles_repo.add(profile_factory("u2", "Vikram", "Shah"))
    _sick_request(service, "u1")
    other = _sick_request(service, "u2")
    service.reject(other.id, reviewer_id="hr1")

    pending = service.list_requests(status=RequestStatus.PENDING)
    assert [r.request.user_id for r in pending] == ["u1"]

    everything = service.list_requests(search="shah")
    assert [r.to_dict()["full_name"] for r in everything] == ["Vikram Shah"]

    mine = service.list_my_requests("u2")
    assert [r.request.status for r in mine] == [RequestStatus.REJECTED]


def test_approved_leave_day_stays_leave_when_employee_checks_in(service, container, leave_balance_repo, attendance_repo):
    leave_balance_repo.set("u1", sick_leave=5)
    req = service.submit(user_id="u1", leave_type="sick", start_date=date(2024, 3, 11), end_date=date(2024, 3, 11))
    service.approve(req.id, reviewer_id="hr1")

    with pytest.raises(ValidationError):
        container.attendance_service.check_in("u1", now=datetime(2024, 3, 11, 9, 0))

    assert attendance_repo.get_for_user_and_date("u1", date(2024, 3, 11)).status == AttendanceStatus.LEAVE
    assert service.get_balance("u1").sick_leave == 4
