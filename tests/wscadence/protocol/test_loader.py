"""
Tests for message sequence loading and validation.
"""

import json

import pytest
from pydantic import ValidationError

from wscadence.exceptions import SequenceLoadError
from wscadence.protocol.loader import (
    load_sequence_file,
    parse_sequence_data,
    parse_sequence_json,
)
from wscadence.protocol.messages import MessageSequence, ProtocolMessage


class TestParseSequenceData:
    """Test validation rules of decoded sequence data."""

    def test_valid_sequence(self):
        sequence = parse_sequence_data(
            [{"text": "hello", "delay": 2000}, {"text": "bye", "delay": 10}]
        )
        assert sequence == MessageSequence(
            [ProtocolMessage(text="hello", delay=2000), ProtocolMessage(text="bye", delay=10)]
        )

    def test_empty_array_is_valid(self):
        assert len(parse_sequence_data([])) == 0

    def test_integral_float_delay_is_accepted(self):
        sequence = parse_sequence_data([{"text": "a", "delay": 2000.0}])
        assert sequence.at(0).delay == 2000
        assert isinstance(sequence.at(0).delay, int)

    def test_extra_keys_are_ignored(self):
        sequence = parse_sequence_data([{"text": "a", "delay": 5, "note": "x"}])
        assert sequence.at(0) == ProtocolMessage(text="a", delay=5)

    def test_bare_object_rejected(self):
        with pytest.raises(SequenceLoadError, match=r'Expect "data" to be an array; got object'):
            parse_sequence_data({"text": "a", "delay": 5})

    def test_element_not_object_rejected(self):
        with pytest.raises(SequenceLoadError, match=r'"data\[1\]" to be an object; got string'):
            parse_sequence_data([{"text": "a", "delay": 5}, "b"])

    def test_null_element_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"to be an object; got null"):
            parse_sequence_data([None])

    def test_missing_text_rejected(self):
        with pytest.raises(SequenceLoadError, match=r'"data\[0\].text" to be a string; got null'):
            parse_sequence_data([{"delay": 5}])

    def test_non_string_text_rejected(self):
        with pytest.raises(SequenceLoadError, match=r'"data\[0\].text" to be a string; got number'):
            parse_sequence_data([{"text": 1, "delay": 5}])

    def test_empty_text_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"non-empty string"):
            parse_sequence_data([{"text": "", "delay": 5}])

    def test_missing_delay_rejected(self):
        with pytest.raises(SequenceLoadError, match=r'"data\[0\].delay" to be a number; got null'):
            parse_sequence_data([{"text": "a"}])

    def test_string_delay_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"to be a number; got string"):
            parse_sequence_data([{"text": "a", "delay": "5"}])

    def test_boolean_delay_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"to be a number; got boolean"):
            parse_sequence_data([{"text": "a", "delay": True}])

    def test_negative_delay_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"positive integer number; got -5"):
            parse_sequence_data([{"delay": -5, "text": "a"}])

    def test_zero_delay_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"positive integer number; got 0"):
            parse_sequence_data([{"delay": 0, "text": "a"}])

    def test_fractional_delay_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"positive integer number; got 1.5"):
            parse_sequence_data([{"delay": 1.5, "text": "a"}])

    def test_delay_out_of_range_rejected(self):
        with pytest.raises(SequenceLoadError, match=r'"data\[0\].delay" to be at most 2147483647'):
            parse_sequence_data([{"text": "a", "delay": 1000000000000000}])

    def test_largest_delay_is_accepted(self):
        sequence = parse_sequence_data([{"text": "a", "delay": 2**31 - 1}])
        assert sequence.at(0).delay == 2**31 - 1

    def test_validation_error_is_chained(self):
        with pytest.raises(SequenceLoadError) as exc_info:
            parse_sequence_data([{"text": "", "delay": 5}])
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_each_rule_has_a_distinct_message(self):
        """The four documented rejections produce four different errors."""
        cases = [
            {"text": "a", "delay": 5},
            [{"delay": -5, "text": "a"}],
            [{"text": "a"}],
            [{"delay": 5}],
        ]
        messages = set()
        for case in cases:
            with pytest.raises(SequenceLoadError) as exc_info:
                parse_sequence_data(case)
            messages.add(str(exc_info.value))
        assert len(messages) == 4


class TestParseSequenceJson:
    """Test JSON decoding."""

    def test_valid_json(self):
        sequence = parse_sequence_json('[{"text": "a", "delay": 5}]')
        assert sequence.at(0).text == "a"

    def test_invalid_json_rejected(self):
        with pytest.raises(SequenceLoadError, match=r'Expect "data" to be a JSON string') as exc_info:
            parse_sequence_json("[{")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_non_finite_delay_rejected(self):
        with pytest.raises(SequenceLoadError, match=r"positive integer number"):
            parse_sequence_json('[{"text": "a", "delay": Infinity}]')


class TestLoadSequenceFile:
    """Test reading sequence files."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "protocol.json"
        path.write_text(json.dumps([{"text": "hello", "delay": 2000}]), encoding="utf-8")

        sequence = load_sequence_file(path)

        assert sequence.at(0) == ProtocolMessage(text="hello", delay=2000)

    def test_load_file_accepts_str_path(self, tmp_path):
        path = tmp_path / "protocol.json"
        path.write_text("[]", encoding="utf-8")
        assert len(load_sequence_file(str(path))) == 0

    def test_missing_file_rejected(self, tmp_path):
        path = tmp_path / "missing.json"
        with pytest.raises(SequenceLoadError, match=r"Cannot read the file") as exc_info:
            load_sequence_file(path)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_schema_error_in_file(self, tmp_path):
        path = tmp_path / "protocol.json"
        path.write_text('{"text": "a"}', encoding="utf-8")
        with pytest.raises(SequenceLoadError, match=r"to be an array"):
            load_sequence_file(path)

    def test_shipped_protocol_files_are_valid(self):
        from pathlib import Path

        root = Path(__file__).resolve().parents[3]
        for name in ("protocol-server.json", "protocol-client.json"):
            assert load_sequence_file(root / name).total_delay_ms == 19000
