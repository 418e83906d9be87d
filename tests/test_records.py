from app.analytics.records import detect_personal_record


def test_heavier_weight_is_max_weight_record():
    result = detect_personal_record(100, 5, prior_max_weight=90, prior_max_reps=5)
    assert result.is_new_max_weight is True
    assert result.is_new_rep_pr is False


def test_more_reps_at_heavy_weight_is_rep_record():
    result = detect_personal_record(90, 8, prior_max_weight=100, prior_max_reps=6)
    assert result.is_new_max_weight is False
    assert result.is_new_rep_pr is True


def test_low_reps_never_count_as_rep_record():
    result = detect_personal_record(90, 3, prior_max_weight=100, prior_max_reps=0)
    assert result.is_new_max_weight is False
    assert result.is_new_rep_pr is False


def test_rep_threshold_is_exclusive():
    at_threshold = detect_personal_record(90, 5, prior_max_weight=100, prior_max_reps=None)
    above = detect_personal_record(90, 6, prior_max_weight=100, prior_max_reps=None)
    assert at_threshold.is_new_rep_pr is False
    assert above.is_new_rep_pr is True


def test_matching_previous_reps_is_not_a_record():
    result = detect_personal_record(90, 8, prior_max_weight=100, prior_max_reps=8)
    assert result.is_new_rep_pr is False


def test_equal_weight_is_not_a_max_weight_record():
    result = detect_personal_record(100, 3, prior_max_weight=100, prior_max_reps=5)
    assert result.is_new_max_weight is False


def test_first_set_on_exercise_is_max_weight_only():
    result = detect_personal_record(60, 12, prior_max_weight=None, prior_max_reps=None)
    assert result.is_new_max_weight is True
    assert result.is_new_rep_pr is False


def test_flags_are_mutually_exclusive_even_with_many_reps():
    result = detect_personal_record(120, 20, prior_max_weight=100, prior_max_reps=2)
    assert (result.is_new_max_weight, result.is_new_rep_pr) == (True, False)


def test_min_reps_is_configurable():
    result = detect_personal_record(90, 4, 100, 2, min_reps=3)
    assert result.is_new_rep_pr is True
