"""
Tests for draft.py - row draft construction and initial state.
"""

import json
from datetime import timedelta

import pytest

from jobriver.draft import SCHEDULED_TOLERANCE, build_draft, canonical_args, initial_state
from jobriver.insert_opts import InsertOpts, resolve_insert_opts
from jobriver.job_args import JobArgsDict
from jobriver.job_row import JobState

from sample_jobs import FIXED_NOW, SimpleArgs


class TestInitialState:
    """Test available vs scheduled assignment."""

    def test_now_is_available(self):
        assert initial_state(FIXED_NOW, FIXED_NOW) == JobState.AVAILABLE

    def test_past_is_available(self):
        assert initial_state(FIXED_NOW - timedelta(hours=1), FIXED_NOW) == JobState.AVAILABLE

    def test_future_is_scheduled(self):
        assert initial_state(FIXED_NOW + timedelta(hours=1), FIXED_NOW) == JobState.SCHEDULED

    def test_within_tolerance_is_available(self):
        assert initial_state(FIXED_NOW + SCHEDULED_TOLERANCE, FIXED_NOW) == JobState.AVAILABLE

    def test_just_past_tolerance_is_scheduled(self):
        later = FIXED_NOW + SCHEDULED_TOLERANCE + timedelta(microseconds=1)
        assert initial_state(later, FIXED_NOW) == JobState.SCHEDULED


class TestBuildDraft:
    """Test draft fields."""

    def test_defaults(self):
        draft = build_draft(SimpleArgs(job_num=1), resolve_insert_opts(), FIXED_NOW)
        assert draft.kind == "simple"
        assert json.loads(draft.args) == {"job_num": 1}
        assert draft.attempt == 0
        assert draft.created_at == FIXED_NOW
        assert draft.scheduled_at == FIXED_NOW
        assert draft.state == JobState.AVAILABLE
        assert draft.max_attempts == 25
        assert draft.priority == 1
        assert draft.queue == "default"
        assert draft.tags == ()

    def test_options_copied(self):
        target = FIXED_NOW + timedelta(hours=1)
        opts = resolve_insert_opts(
            InsertOpts(max_attempts=17, priority=3, queue="my_queue", tags=["custom"], scheduled_at=target)
        )
        draft = build_draft(SimpleArgs(job_num=1), opts, FIXED_NOW)
        assert draft.max_attempts == 17
        assert draft.priority == 3
        assert draft.queue == "my_queue"
        assert draft.tags == ("custom",)
        assert draft.scheduled_at == target
        assert draft.state == JobState.SCHEDULED
        assert draft.created_at == FIXED_NOW

    def test_deterministic_with_fixed_clock(self):
        args = JobArgsDict("hash_kind", {"b": 2, "a": [1, 2]})
        first = build_draft(args, resolve_insert_opts(), FIXED_NOW)
        second = build_draft(args, resolve_insert_opts(), FIXED_NOW)
        assert first == second

    def test_payload_reused_when_given(self):
        class CountingArgs(SimpleArgs):
            calls = 0

            def to_payload(self):
                CountingArgs.calls += 1
                return super().to_payload()

        args = CountingArgs(job_num=7)
        draft = build_draft(args, resolve_insert_opts(), FIXED_NOW, payload=b'{"job_num": 7}')
        assert CountingArgs.calls == 0
        assert json.loads(draft.args) == {"job_num": 7}


class TestCanonicalArgs:
    """Test storage serialization of args."""

    def test_compact(self):
        assert canonical_args(b'{ "job_num" :  1 }') == '{"job_num":1}'

    def test_round_trips_to_equal_map(self):
        payload = json.dumps({"nested": {"x": [1, 2, None]}, "flag": True, "name": "café"}).encode()
        assert json.loads(canonical_args(payload)) == json.loads(payload)

    def test_never_emits_non_finite_numbers(self):
        with pytest.raises(ValueError):
            canonical_args(b'{"x": NaN}')
