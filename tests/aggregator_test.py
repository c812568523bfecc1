from datetime import datetime

from app.schemas.contest import Forecast
from app.schemas.scoring import ScoringPolicy
from app.services.aggregator import aggregate, decided_events, is_voting_closed, score_forecast
from conftest import GRID, NOW, make_event, make_forecast, make_result


def _by_user(scores):
    return {s.user_id: s for s in scores}


def test_perfect_forecast_scores_every_pick(users, policy):
    scores = _by_user(aggregate(users, [make_event("r1")], [make_forecast("u1", "r1")],
                                [make_result("r1")], policy, now=NOW))
    s = scores["u1"]
    assert s.total_points == 5 + 5 + 3 + 2 + 1 * 7 + 1
    assert (s.pole_hits, s.crash_hits, s.position_hits) == (1, 1, 10)
    assert (s.total_pole_votes, s.total_crash_votes, s.total_position_votes) == (1, 1, 10)
    assert s.races_participated == 1
    assert s.pole_accuracy == s.crash_accuracy == s.position_accuracy == 100.0
    assert s.display_name == "Ana"
    assert s.email == "ana@example.com"

def test_displaced_picks_earn_nothing(users, policy):
    swapped = ["B", "A"] + GRID[2:]
    scores = _by_user(aggregate(users, [make_event("r1")], [make_forecast("u1", "r1", positions=swapped)],
                                [make_result("r1")], policy, now=NOW))
    s = scores["u1"]
    assert s.total_points == 5 + 0 + 0 + 2 + 1 * 7 + 1
    assert s.position_hits == 8
    assert s.position_accuracy == 80.0

def test_pick_outside_result_is_a_miss(users, policy):
    picks = ["Z"] + GRID[1:]
    s = _by_user(aggregate(users, [make_event("r1")], [make_forecast("u1", "r1", positions=picks)],
                           [make_result("r1")], policy, now=NOW))["u1"]
    assert s.position_hits == 9
    assert s.total_points == 23 - 5

def test_open_race_only_marks_participation(users, policy):
    scores = _by_user(aggregate(users, [make_event("r1", closed=False)], [make_forecast("u1", "r1")],
                                [make_result("r1")], policy, now=NOW))
    s = scores["u1"]
    assert s.has_voted is True
    assert s.total_points == 0
    assert s.races_participated == 0
    assert s.total_pole_votes == s.total_crash_votes == s.total_position_votes == 0

def test_race_without_result_is_skipped(users, policy):
    scores = _by_user(aggregate(users, [make_event("r1")], [make_forecast("u1", "r1")],
                                [], policy, now=NOW))
    assert scores["u1"].has_voted is True
    assert scores["u1"].total_points == 0
    assert scores["u1"].races_participated == 0

def test_every_user_is_returned_with_safe_accuracies(users, policy):
    scores = aggregate(users, [make_event("r1")], [make_forecast("u1", "r1")],
                       [make_result("r1")], policy, now=NOW)
    assert [s.user_id for s in scores] == ["u1", "u2", "u3"]
    idle = _by_user(scores)["u2"]
    assert idle.has_voted is False
    assert idle.pole_accuracy == idle.crash_accuracy == idle.position_accuracy == 0.0
    assert _by_user(scores)["u3"].display_name == "User"

def test_short_and_empty_position_lists(users, policy):
    forecasts = [
        make_forecast("u1", "r1", positions=["A", "B"]),
        make_forecast("u2", "r1", positions=[]),
        make_forecast("u3", "r1", positions=["A", None, "", "D"]),
    ]
    scores = _by_user(aggregate(users, [make_event("r1")], forecasts, [make_result("r1")], policy, now=NOW))
    assert scores["u1"].position_hits == 2
    assert scores["u1"].total_position_votes == 10
    assert scores["u2"].position_hits == 0
    assert scores["u3"].position_hits == 2
    assert scores["u3"].total_points == 5 + 5 + 1 + 1

def test_short_official_result(users, policy):
    result = make_result("r1", positions=["A", "B", "C"])
    s = _by_user(aggregate(users, [make_event("r1")], [make_forecast("u1", "r1")], [result], policy, now=NOW))["u1"]
    assert s.position_hits == 3
    assert s.total_points == 5 + 5 + 3 + 2 + 1

def test_duplicate_pick_only_scores_its_real_slot(users, policy):
    picks = ["A", "A"] + GRID[2:]
    s = _by_user(aggregate(users, [make_event("r1")], [make_forecast("u1", "r1", positions=picks)],
                           [make_result("r1")], policy, now=NOW))["u1"]
    assert s.position_hits == 9

def test_empty_crash_on_both_sides_is_a_hit(users, policy):
    s = _by_user(aggregate(users, [make_event("r1")],
                           [Forecast(user_id="u1", race_id="r1", pole="B", positions=[], crash_pilot=None)],
                           [make_result("r1", crash_pilot="")], policy, now=NOW))["u1"]
    assert s.crash_hits == 1
    assert s.total_points == policy.crash

def test_forecasts_from_unknown_users_are_ignored(users, policy):
    scores = aggregate(users, [make_event("r1")], [make_forecast("ghost", "r1")],
                       [make_result("r1")], policy, now=NOW)
    assert "ghost" not in _by_user(scores)
    assert not any(s.has_voted for s in scores)

def test_points_accumulate_across_races_with_custom_policy(users):
    policy = ScoringPolicy(pole=10, position1=0, position2=0, position3=0, position4to10=0, crash=3)
    events = [make_event("r1"), make_event("r2"), make_event("r3", closed=False)]
    forecasts = [make_forecast("u1", "r1"), make_forecast("u1", "r2", pole="B", crash_pilot="Z"),
                 make_forecast("u1", "r3")]
    results = [make_result("r1"), make_result("r2"), make_result("r3")]
    s = _by_user(aggregate(users, events, forecasts, results, policy, now=NOW))["u1"]
    assert s.races_participated == 2
    assert s.total_points == 10 + 3
    assert s.pole_accuracy == 50.0
    assert s.crash_accuracy == 50.0
    assert s.position_hits == 20
    assert s.total_position_votes == 20

def test_aggregate_is_deterministic(users, policy):
    args = (users, [make_event("r1"), make_event("r2")],
            [make_forecast("u1", "r1"), make_forecast("u2", "r1", pole="C"), make_forecast("u2", "r2")],
            [make_result("r1"), make_result("r2")], policy)
    first = [s.model_dump() for s in aggregate(*args, now=NOW)]
    second = [s.model_dump() for s in aggregate(*args, now=NOW)]
    assert first == second

def test_voting_closed_handles_naive_deadlines():
    event = make_event("r1")
    naive = event.model_copy(update={"voting_deadline": event.voting_deadline.replace(tzinfo=None)})
    assert is_voting_closed(naive, NOW) is True
    assert is_voting_closed(make_event("r2", closed=False), NOW) is False
    assert is_voting_closed(naive, datetime(2000, 1, 1)) is False

def test_decided_events_needs_deadline_and_result():
    events = [make_event("r1"), make_event("r2"), make_event("r3", closed=False)]
    decided = decided_events(events, [make_result("r1"), make_result("r3")], now=NOW)
    assert [e.id for e in decided] == ["r1"]

def test_score_breakdown(policy):
    swapped = ["B", "A"] + GRID[2:]
    breakdown = score_forecast(make_forecast("u1", "r1", positions=swapped, crash_pilot="J"),
                               make_result("r1"), policy)
    assert breakdown.pole.hit and breakdown.pole.points == 5
    assert not breakdown.crash.hit and breakdown.crash.points == 0
    assert breakdown.crash.actual == "K"
    first, second, third = breakdown.positions[:3]
    assert (first.position, first.predicted, first.actual, first.points) == (1, "B", "A", 0)
    assert (second.predicted, second.actual, second.hit) == ("A", "B", False)
    assert third.points == 2
    assert breakdown.total_points == 5 + 2 + 7
