from datetime import timedelta

import pytest

from aid_requests.models import AidRequest
from triage.policy import TriagePolicy, default_triage_policy
from triage.scorer import (
    TriageCategory,
    calculate_triage_score,
    get_triage_category,
    sort_by_triage_score,
)


def make_request(now, request_id="r1", priority="medium", aid_type="food", age_hours=0.0, **extra):
    return {
        "id": request_id,
        "priority": priority,
        "aid_type": aid_type,
        "created_at": (now - timedelta(hours=age_hours)).isoformat(),
        **extra,
    }


def test_urgent_medicine_fresh_request_scores_31(now):
    request = make_request(now, priority="urgent", aid_type="medicine")

    assert calculate_triage_score(request, now=now) == 31.00


def test_age_bonus_grows_half_a_point_per_hour_and_caps_at_5(now):
    # low * other = 1, vulnerability = 1
    assert calculate_triage_score(make_request(now, priority="low", aid_type="other", age_hours=2), now=now) == 3.0
    assert calculate_triage_score(make_request(now, priority="low", aid_type="other", age_hours=10), now=now) == 7.0
    assert calculate_triage_score(make_request(now, priority="low", aid_type="other", age_hours=72), now=now) == 7.0


def test_unknown_priority_and_aid_type_use_defaults(now):
    # medium (4) * default aid weight (1) + 0 + 1
    request = make_request(now, priority="catastrophic", aid_type="batteries")
    assert calculate_triage_score(request, now=now) == 5.0

    missing = {"id": "x", "created_at": now.isoformat()}
    assert calculate_triage_score(missing, now=now) == 5.0


def test_priority_and_aid_type_are_case_insensitive(now):
    request = make_request(now, priority=" HIGH ", aid_type="Shelter")

    assert calculate_triage_score(request, now=now) == 7 * 2.5 + 1


@pytest.mark.parametrize("created_at", [None, "", "not a date", "2024-13-45T99:00:00"])
def test_bad_or_missing_dates_give_no_age_bonus(now, created_at):
    request = {"id": "x", "priority": "high", "aid_type": "food", "created_at": created_at}

    assert calculate_triage_score(request, now=now) == 7 * 2 + 1


def test_future_timestamps_give_no_age_bonus(now):
    request = make_request(now, priority="high", aid_type="food", age_hours=-5)

    assert calculate_triage_score(request, now=now) == 15.0


def test_trimmed_fractional_timestamps_still_earn_the_age_bonus(now):
    request = {
        "id": "db-row",
        "priority": "low",
        "aid_type": "other",
        "created_at": "2024-05-01T00:00:00.12345+00:00",
    }

    assert calculate_triage_score(request, now=now) == 1 + 5 + 1


def test_timestamp_field_is_used_when_created_at_is_missing(now):
    request = {
        "id": "legacy",
        "priority": "low",
        "aid_type": "other",
        "timestamp": (now - timedelta(hours=4)).isoformat(),
    }

    assert calculate_triage_score(request, now=now) == 1 + 2 + 1


def test_score_is_rounded_half_up_to_two_places(now):
    # 1 * 1 + (0.25 hours * 0.5 = 0.125) + 1 -> 2.125 -> 2.13 (round() would give 2.12)
    request = make_request(now, priority="low", aid_type="other", age_hours=0.25)

    assert calculate_triage_score(request, now=now) == 2.13


def test_accepts_aid_request_objects(now):
    request = AidRequest(id="obj", priority="urgent", aid_type="shelter", created_at=now)

    assert calculate_triage_score(request, now=now) == 26.0


def test_higher_priority_never_scores_lower(now):
    """
    For equal aid type, a higher priority with the same or an older age scores at least as much.
    """
    ordered = ["low", "medium", "high", "urgent"]
    for aid_type in ["food", "medicine", "shelter", "clothing", "transportation", "other", "unknown"]:
        for age_hours in [0, 1, 3, 9, 30]:
            for lower_index, lower in enumerate(ordered):
                for higher in ordered[lower_index + 1:]:
                    low_score = calculate_triage_score(
                        make_request(now, priority=lower, aid_type=aid_type, age_hours=age_hours), now=now
                    )
                    for extra_age in [0, 2, 12]:
                        high_score = calculate_triage_score(
                            make_request(now, priority=higher, aid_type=aid_type, age_hours=age_hours + extra_age),
                            now=now,
                        )
                        assert high_score >= low_score


def test_sort_by_triage_score_orders_highest_first(now):
    requests = [
        make_request(now, "low", priority="low", aid_type="other"),
        make_request(now, "urgent", priority="urgent", aid_type="medicine"),
        make_request(now, "mid", priority="medium", aid_type="food"),
    ]

    ranked = sort_by_triage_score(requests, now=now)

    assert [scored.id for scored in ranked] == ["urgent", "mid", "low"]
    assert [scored.triage_score for scored in ranked] == [31.0, 9.0, 2.0]


def test_sort_by_triage_score_is_stable_for_equal_scores(now):
    requests = [
        make_request(now, "first", priority="high", aid_type="food"),
        make_request(now, "top", priority="urgent", aid_type="medicine"),
        make_request(now, "second", priority="high", aid_type="food"),
        # clothing and other share weight 1, so these tie too
        make_request(now, "third", priority="low", aid_type="clothing"),
        make_request(now, "fourth", priority="low", aid_type="other"),
        make_request(now, "fifth", priority="high", aid_type="food"),
    ]

    ranked = sort_by_triage_score(requests, now=now)

    assert [scored.id for scored in ranked] == ["top", "first", "second", "fifth", "third", "fourth"]


def test_sort_does_not_touch_the_input(now):
    requests = [make_request(now, "a"), make_request(now, "b", priority="urgent")]
    snapshot = [dict(request) for request in requests]

    ranked = sort_by_triage_score(requests, now=now)

    assert requests == snapshot
    assert "triageScore" not in requests[0]
    assert ranked[0].to_record()["triageScore"] == ranked[0].triage_score


@pytest.mark.parametrize(
    "score, expected",
    [
        (31, TriageCategory.CRITICAL),
        (20, TriageCategory.CRITICAL),
        (19.99, TriageCategory.HIGH),
        (15, TriageCategory.HIGH),
        (10, TriageCategory.MEDIUM),
        (9.99, TriageCategory.LOW),
        (0, TriageCategory.LOW),
    ],
)
def test_get_triage_category_thresholds(score, expected):
    assert get_triage_category(score) == expected


def test_custom_policy_changes_weights(now):
    policy = TriagePolicy(vulnerability_score=0, max_age_bonus=0)
    request = make_request(now, priority="urgent", aid_type="medicine", age_hours=8)

    assert calculate_triage_score(request, now=now, policy=policy) == 30.0


def test_policy_validation_rejects_bad_values():
    with pytest.raises(ValueError):
        TriagePolicy(default_priority="extreme").validate()

    with pytest.raises(ValueError):
        TriagePolicy(critical_threshold=5).validate()

    default_triage_policy()  # does not raise
