"""An attended day turning into an absence never makes a student look healthier."""

import itertools
import random

import pytest

from src.attendance_risk.attendance_risk.engine import AttendanceRiskEngine
from src.attendance_risk.attendance_risk.risk.model import NoAssessment


@pytest.fixture
def engine():
    return AttendanceRiskEngine()


def _scores(engine, events, statuses, as_of):
    outcome = engine.assess(events(statuses), as_of=as_of)
    if isinstance(outcome, NoAssessment):
        return None
    return outcome.risk_score, outcome.engagement_score


def _with_one_more_absence(statuses):
    for i, code in enumerate(statuses):
        if code == "P":
            yield statuses[:i] + "A" + statuses[i + 1 :]


def _histories():
    for statuses in itertools.product("PA", repeat=7):
        yield "".join(statuses)
    rng = random.Random(20260302)
    for _ in range(80):
        yield "".join(rng.choices("PPPPPALE", k=rng.randint(4, 30)))


@pytest.mark.parametrize(
    "before, after",
    [("PPAAPP", "APAAPP"), ("PPPAPP", "APPAPP"), ("PPPPAP", "PAPPAP")],
)
def test_earlier_absence_is_not_read_as_a_recovery(engine, events, as_of, before, after):
    risk_before, engagement_before = _scores(engine, events, before, as_of)
    risk_after, engagement_after = _scores(engine, events, after, as_of)

    assert risk_after >= risk_before
    assert engagement_after <= engagement_before


def test_one_more_absence_never_lowers_risk_or_raises_engagement(engine, events, as_of):
    compared = 0
    for statuses in _histories():
        before = _scores(engine, events, statuses, as_of)
        if before is None:
            continue
        for worse in _with_one_more_absence(statuses):
            after = _scores(engine, events, worse, as_of)
            if after is None:
                continue
            assert after[0] >= before[0], (statuses, worse)
            assert after[1] <= before[1], (statuses, worse)
            compared += 1

    assert compared > 500
