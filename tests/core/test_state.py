"""Tests for scan state and the mode machine."""

import pytest

from earforge.core.state import ScanMode, ScanState, scan_progress


def test_scan_state_defaults():
    st = ScanState()
    assert st.mode is ScanMode.SCANNING
    assert st.total_vertices == 0
    assert st.progress == 0
    assert st.is_ready is False


def test_progress_percent():
    assert scan_progress(0) == 0
    assert scan_progress(500) == 25
    assert scan_progress(1999) == 99
    assert scan_progress(2000) == 100
    assert scan_progress(10000) == 100


def test_ready_needs_more_than_threshold():
    st = ScanState(total_vertices=2000)
    assert st.progress == 100
    assert st.is_ready is False
    st.total_vertices = 2001
    assert st.is_ready is True


def test_forward_transitions():
    st = ScanState()
    assert st.transition(ScanMode.DISTORTED) is ScanMode.SCANNING
    assert st.transition(ScanMode.SAVED) is ScanMode.DISTORTED
    assert st.mode is ScanMode.SAVED


def test_reset_always_allowed():
    for mode in ScanMode:
        st = ScanState(mode=mode)
        st.transition(ScanMode.SCANNING)
        assert st.mode is ScanMode.SCANNING


def test_invalid_transition_raises():
    st = ScanState()
    with pytest.raises(ValueError):
        st.transition(ScanMode.SAVED)
    assert st.mode is ScanMode.SCANNING
