from datetime import timedelta

import pytest

from conftest import KM_IN_DEGREES
from dispatch.candidate_filter import build_candidate_requests
from dispatch.dispatcher import Dispatcher
from dispatch.route_plan import RoutePlanError, RouteStatus, create_route_plan
from dispatch.state_machines.request_state import (
    RequestStateException,
    apply_assignment,
    assign_route_to_volunteer,
    release_request,
    transition_request_status,
)
from dispatch.state_machines.route_state import (
    RouteStateException,
    cancel_route,
    complete_route,
    start_route,
)
from aid_requests.models import AidRequest
from routing.models import RouteResult
from routing.optimizer import RouteOptimizer, optimize_route


@pytest.fixture
def board(now):
    """
    What a volunteer's dashboard query returns: mixed statuses and owners.
    """
    created = (now - timedelta(hours=1)).isoformat()
    return [
        {"id": "food-2km", "status": "open", "priority": "medium", "aid_type": "food",
         "latitude": 0.0, "longitude": 2 * KM_IN_DEGREES, "created_at": created, "name": "A", "location": "Camp A"},
        {"id": "meds-1km", "status": "pending", "priority": "high", "aid_type": "medicine",
         "latitude": 0.0, "longitude": 1 * KM_IN_DEGREES, "created_at": created, "name": "B", "location": "Camp B"},
        {"id": "mine", "status": "in-progress", "priority": "low", "aid_type": "other", "assigned_to": "vol-1",
         "latitude": 0.0, "longitude": 3 * KM_IN_DEGREES, "created_at": created},
        {"id": "theirs", "status": "in-progress", "priority": "urgent", "aid_type": "shelter", "assigned_to": "vol-2",
         "latitude": 0.0, "longitude": 4 * KM_IN_DEGREES, "created_at": created},
        {"id": "closed", "status": "fulfilled", "priority": "urgent", "aid_type": "medicine",
         "latitude": 0.0, "longitude": 0.5 * KM_IN_DEGREES, "created_at": created},
        {"id": "no-gps", "status": "open", "priority": "urgent", "aid_type": "medicine",
         "latitude": "", "longitude": "", "created_at": created},
    ]


def test_candidates_follow_status_and_ownership_rules(board, now):
    candidates = build_candidate_requests(board, "vol-1", now=now)

    assert [candidate.id for candidate in candidates] == ["no-gps", "meds-1km", "food-2km", "mine"]


def test_admins_see_requests_assigned_to_others(board, now):
    candidates = build_candidate_requests(board, "admin", is_admin=True, now=now)

    assert "theirs" in [candidate.id for candidate in candidates]
    assert "closed" not in [candidate.id for candidate in candidates]


def test_plan_route_builds_plan_and_assignments(board, now, start):
    result = Dispatcher().plan_route(board, "vol-1", start, "nearest", now=now)

    assert result.route.request_ids == ["meds-1km", "food-2km", "mine"]
    assert result.route.distance == pytest.approx(3.0)

    plan = result.plan
    assert plan.volunteer_id == "vol-1"
    assert plan.request_order == ["meds-1km", "food-2km", "mine"]
    assert plan.status == RouteStatus.PENDING
    assert plan.created_at == now
    assert plan.waypoints[0].location == "Camp B"
    assert plan.to_record()["route_waypoints"][0]["request_id"] == "meds-1km"

    assert [(update.request_id, update.route_order) for update in result.assignments] == [
        ("meds-1km", 1),
        ("food-2km", 2),
        ("mine", 3),
    ]
    assert all(update.assigned_to == "vol-1" for update in result.assignments)
    assert all(update.status == "in-progress" for update in result.assignments)


def test_plan_route_limits_to_selected_ids(board, now, start):
    result = Dispatcher().plan_route(board, "vol-1", start, request_ids=["food-2km"], now=now)

    assert result.route.request_ids == ["food-2km"]


def test_plan_route_without_routable_requests_raises(board, now, start):
    with pytest.raises(RoutePlanError):
        Dispatcher().plan_route(board, "vol-1", start, request_ids=["no-gps", "closed"], now=now)


def test_plan_route_uses_the_injected_optimizer(board, now, start):
    optimizer = RouteOptimizer()
    result = Dispatcher(optimizer=optimizer).plan_route(board, "vol-1", start, "openrouteservice", now=now)

    # no key configured, so the provider degrades to nearest neighbor
    assert result.route.method == "nearest"


def test_create_route_plan_needs_stops():
    with pytest.raises(RoutePlanError):
        create_route_plan("vol-1", RouteResult())


def test_route_status_lifecycle(board, now, start):
    plan = create_route_plan("vol-1", optimize_route(board, start), now=now)

    started = start_route(plan, now=now + timedelta(minutes=5))
    assert started.status == RouteStatus.ACTIVE
    assert started.started_at == now + timedelta(minutes=5)
    assert plan.status == RouteStatus.PENDING  # frozen, original untouched

    finished = complete_route(started, now=now + timedelta(hours=1))
    assert finished.status == RouteStatus.COMPLETED
    assert finished.completed_at == now + timedelta(hours=1)

    with pytest.raises(RouteStateException):
        cancel_route(finished)

    with pytest.raises(RouteStateException):
        complete_route(plan)

    assert cancel_route(plan).status == RouteStatus.CANCELLED


def test_apply_assignment_and_release(board, now, start):
    route = optimize_route(board[:2], start)
    updates = assign_route_to_volunteer(route, "vol-1", now=now)
    request = AidRequest.from_record(board[1])

    assigned = apply_assignment(request, updates[0])
    assert assigned.assigned_to == "vol-1"
    assert assigned.status == "in-progress"
    assert assigned.route_order == 1

    released = release_request(assigned)
    assert released.assigned_to is None
    assert released.route_order is None
    assert released.status == "open"

    with pytest.raises(RequestStateException):
        apply_assignment(AidRequest.from_record(board[0]), updates[0])


def test_closed_requests_cannot_be_assigned_or_silently_reopened(board, now, start):
    closed = AidRequest.from_record(board[4])
    updates = assign_route_to_volunteer(optimize_route([closed], start), "vol-1", now=now)

    with pytest.raises(RequestStateException):
        apply_assignment(closed, updates[0])

    with pytest.raises(RequestStateException):
        transition_request_status(closed, "open")

    assert transition_request_status(closed, "open", allow_reopen=True).status == "open"
    assert release_request(closed) is closed


def test_request_status_follows_the_open_to_fulfilled_lifecycle():
    request = AidRequest(id=1, status="open")

    in_progress = transition_request_status(request, "in-progress")
    assert in_progress.status == "in-progress"
    assert transition_request_status(in_progress, "fulfilled").status == "fulfilled"
    assert transition_request_status(in_progress, "resolved").status == "resolved"
    assert transition_request_status(in_progress, "open").status == "open"
    assert transition_request_status(AidRequest(id=2, status="pending"), "in-progress").status == "in-progress"


@pytest.mark.parametrize(
    "current, target",
    [
        ("open", "fulfilled"),
        ("pending", "resolved"),
        ("fulfilled", "resolved"),
        ("resolved", "fulfilled"),
        ("fulfilled", "in-progress"),
    ],
)
def test_request_status_rejects_skipped_or_closed_transitions(current, target):
    with pytest.raises(RequestStateException):
        transition_request_status(AidRequest(id=1, status=current), target)


def test_allow_reopen_only_moves_closed_requests_back_to_active():
    closed = AidRequest(id=1, status="fulfilled")

    assert transition_request_status(closed, "in-progress", allow_reopen=True).status == "in-progress"
    with pytest.raises(RequestStateException):
        transition_request_status(closed, "resolved", allow_reopen=True)


def test_transition_request_status_rejects_unknown_statuses(board):
    with pytest.raises(ValueError):
        transition_request_status(AidRequest.from_record(board[0]), "lost")


def test_assignment_requires_a_volunteer(start, board):
    with pytest.raises(RequestStateException):
        assign_route_to_volunteer(optimize_route(board[:1], start), None)
