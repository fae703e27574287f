"""Unit tests for the focus state machine."""

import pytest

from gps_relativity.core.errors import NotFoundError
from gps_relativity.core.focus import SYSTEM_FOCUS, FocusKind, FocusStateMachine, FocusTarget
from gps_relativity.data.satellites import SATELLITE_IDS


@pytest.fixture
def focus():
    return FocusStateMachine(SATELLITE_IDS)


class TestFocusTarget:
    """Test cases for the focus variant."""

    def test_only_satellites_take_an_index(self):
        with pytest.raises(ValueError):
            FocusTarget(FocusKind.EARTH, 2)

    def test_equality_and_str(self):
        assert FocusTarget.satellite(3) == FocusTarget(FocusKind.SATELLITE, 3)
        assert str(FocusTarget.satellite(3)) == "SATELLITE[3]"
        assert str(FocusTarget.moon()) == "MOON"


class TestFocusStateMachine:
    """Test cases for focus transitions."""

    def test_starts_on_system(self, focus):
        assert focus.active == SYSTEM_FOCUS
        assert focus.history == (SYSTEM_FOCUS,)
        assert not focus.is_tracking
        assert focus.active_satellite_id is None

    @pytest.mark.parametrize(
        "target",
        [FocusTarget.sun(), FocusTarget.earth(), FocusTarget.moon(), FocusTarget.satellite(4)],
    )
    def test_any_valid_target_is_reachable(self, focus, target):
        focus.select(FocusTarget.satellite(1))
        assert focus.select(target)
        assert focus.active == target

    def test_satellite_without_index_means_first(self, focus):
        assert focus.select(FocusTarget(FocusKind.SATELLITE))
        assert focus.active == FocusTarget.satellite(0)
        assert focus.active_satellite_id == SATELLITE_IDS[0]

    @pytest.mark.parametrize("index", [-1, len(SATELLITE_IDS), 99])
    def test_out_of_range_index_rejected(self, focus, index):
        focus.select(FocusTarget.moon())
        assert not focus.select_satellite(index)
        assert focus.active == FocusTarget.moon()

    def test_no_satellites_rejects_satellite_focus(self):
        focus = FocusStateMachine([])
        assert not focus.select_satellite()
        assert focus.active == SYSTEM_FOCUS

    def test_select_by_id(self, focus):
        assert focus.select_satellite_id("SPECTER-9")
        assert focus.active == FocusTarget.satellite(SATELLITE_IDS.index("SPECTER-9"))
        assert not focus.select_satellite_id("VOYAGER")
        assert focus.active_satellite_id == "SPECTER-9"

    def test_index_of_unknown(self, focus):
        with pytest.raises(NotFoundError):
            focus.index_of("VOYAGER")

    def test_pick_miss_keeps_focus(self, focus):
        focus.select(FocusTarget.earth())
        assert not focus.select_picked(None)
        assert not focus.select_picked(len(SATELLITE_IDS))
        assert focus.active == FocusTarget.earth()
        assert focus.select_picked(2)
        assert focus.active == FocusTarget.satellite(2)

    def test_follow_smoothing_and_tracking(self, focus):
        assert focus.follow_smoothing == pytest.approx(0.1)
        focus.select(FocusTarget.earth())
        assert not focus.is_tracking
        focus.select(FocusTarget.sun())
        assert focus.is_tracking
        focus.select_satellite(0)
        assert focus.is_tracking
        assert focus.follow_smoothing == pytest.approx(0.4)

    def test_history_records_changes_only(self, focus):
        focus.select(FocusTarget.moon())
        focus.select(FocusTarget.moon())
        focus.back_to_system()
        assert focus.history == (SYSTEM_FOCUS, FocusTarget.moon(), SYSTEM_FOCUS)

    def test_history_is_bounded(self, focus):
        for _ in range(FocusStateMachine.HISTORY_LENGTH):
            focus.select(FocusTarget.moon())
            focus.select(FocusTarget.sun())
        history = focus.history
        assert len(history) == FocusStateMachine.HISTORY_LENGTH
        assert history[-1] == focus.active == FocusTarget.sun()
        assert history[-2] == FocusTarget.moon()
