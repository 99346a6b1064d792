from src.attendance_tracker.attendance_tracker.analytics.scoring.standard_scoring import StandardScoreCalculator


def test_attendance_rate():
    calc = StandardScoreCalculator()

    assert calc.attendance_rate(active_users_today=3, expected_user_count=10) == 30
    assert calc.attendance_rate(active_users_today=1, expected_user_count=3) == 33
    assert calc.attendance_rate(active_users_today=5, expected_user_count=0) == 0


def test_productivity_score_is_capped():
    calc = StandardScoreCalculator()

    assert calc.productivity_score(today_event_count=0) == 75
    assert calc.productivity_score(today_event_count=5) == 85
    assert calc.productivity_score(today_event_count=40) == 100


def test_scores_do_not_drop_with_more_activity():
    calc = StandardScoreCalculator()

    productivity = [calc.productivity_score(today_event_count=n) for n in range(30)]
    consistency = [calc.consistency_score(active_days_last_week=n) for n in range(9)]

    assert productivity == sorted(productivity)
    assert consistency == sorted(consistency)
    assert consistency[7] == 100
    assert consistency[8] == 100
    assert consistency[3] == 43


def test_average_work_hours():
    calc = StandardScoreCalculator()

    assert calc.average_work_hours(sign_ins=0, sign_outs=0) == 0.0
    assert calc.average_work_hours(sign_ins=2, sign_outs=1) == 4.0
    assert calc.average_work_hours(sign_ins=0, sign_outs=1) == 8.0
