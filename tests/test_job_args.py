"""
Tests for job args validation.
"""

import json

import pytest

from jobriver.errors import ArgsError, InsertOptsError, InvalidPayloadError, MissingKindError
from jobriver.insert_opts import InsertOpts
from jobriver.job_args import JobArgsDict, args_insert_opts, args_kind, validate_args

from sample_jobs import SimpleArgs, SimpleArgsWithInsertOpts


class PayloadArgs:
    """Args returning whatever payload they're given."""

    kind = "payload"

    def __init__(self, payload):
        self.payload = payload

    def to_payload(self):
        return self.payload


class TestValidateArgs:
    """Test the args capability checks."""

    def test_valid_args(self):
        payload = validate_args(SimpleArgs(job_num=1))
        assert json.loads(payload) == {"job_num": 1}

    def test_str_payload_accepted(self):
        payload = validate_args(PayloadArgs('{"a": 1}'))
        assert payload == b'{"a": 1}'

    def test_missing_kind(self):
        class NoKind:
            def to_payload(self):
                return b"{}"

        with pytest.raises(MissingKindError):
            validate_args(NoKind())

    @pytest.mark.parametrize("kind", ["", "   ", None, 42])
    def test_unusable_kind(self, kind):
        args = PayloadArgs(b"{}")
        args.kind = kind
        with pytest.raises(MissingKindError):
            validate_args(args)

    def test_kind_as_method(self):
        class MethodKind:
            def kind(self):
                return "method_kind"

            def to_payload(self):
                return b"{}"

        assert args_kind(MethodKind()) == "method_kind"

    def test_missing_to_payload(self):
        class NoPayload:
            kind = "no_payload"

        with pytest.raises(InvalidPayloadError):
            validate_args(NoPayload())

    def test_invalid_json(self):
        with pytest.raises(InvalidPayloadError):
            validate_args(PayloadArgs(b"{not json"))

    @pytest.mark.parametrize("payload", [
        b'{"x": NaN}',
        b'{"x": Infinity}',
        b'{"x": [1, -Infinity]}',
    ])
    def test_non_finite_numbers_rejected(self, payload):
        """NaN and Infinity aren't JSON even though Python's parser allows them."""
        with pytest.raises(InvalidPayloadError):
            validate_args(PayloadArgs(payload))

    @pytest.mark.parametrize("payload", [b"[1, 2]", b"1", b'"text"', b"null"])
    def test_top_level_must_be_object(self, payload):
        with pytest.raises(InvalidPayloadError):
            validate_args(PayloadArgs(payload))

    def test_non_text_payload(self):
        with pytest.raises(InvalidPayloadError):
            validate_args(PayloadArgs({"job_num": 1}))

    def test_args_errors_share_base(self):
        assert issubclass(MissingKindError, ArgsError)
        assert issubclass(InvalidPayloadError, ArgsError)

    def test_kind_checked_before_payload(self):
        """to_payload isn't called when kind is already unusable."""
        calls = []

        class Tracking:
            kind = ""

            def to_payload(self):
                calls.append(1)
                return b"{}"

        with pytest.raises(MissingKindError):
            validate_args(Tracking())
        assert calls == []


class TestArgsInsertOpts:
    """Test reading job-specific insert opts."""

    def test_no_insert_opts(self):
        assert args_insert_opts(SimpleArgs(job_num=1)) is None

    def test_attribute_insert_opts(self):
        args = SimpleArgsWithInsertOpts(job_num=1)
        args.insert_opts = InsertOpts(priority=2)
        assert args_insert_opts(args).priority == 2

    def test_method_insert_opts(self):
        class MethodOpts(SimpleArgs):
            def insert_opts(self):
                return InsertOpts(queue="from_method")

        assert args_insert_opts(MethodOpts(job_num=1)).queue == "from_method"

    def test_wrong_type_rejected(self):
        args = SimpleArgsWithInsertOpts(job_num=1)
        args.insert_opts = {"priority": 2}
        with pytest.raises(InsertOptsError):
            args_insert_opts(args)


class TestJobArgsDict:
    """Test the dict-backed args implementation."""

    def test_kind_and_payload(self):
        args = JobArgsDict("hash_kind", {"job_num": 1})
        assert args_kind(args) == "hash_kind"
        assert json.loads(validate_args(args)) == {"job_num": 1}

    def test_blank_kind_fails_validation(self):
        with pytest.raises(MissingKindError):
            validate_args(JobArgsDict("", {"job_num": 1}))
