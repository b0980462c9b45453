import json
import tempfile
from pathlib import Path

import pytest

from contiguous_memory import (
    AllocationInstruction,
    CompactInstruction,
    DeallocationInstruction,
    Instruction,
)
from experiments.trace import load_trace, write_trace


def test_write_and_load_trace():
    instructions = [AllocationInstruction(1, 5), DeallocationInstruction(1), CompactInstruction()]
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "nested" / "trace.jsonl"
        assert write_trace(path, instructions) == 3

        records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
        assert records[0] == {"op": "allocate", "block_id": 1, "dimension": 5}
        assert records[2] == {"op": "compact"}

        assert list(load_trace(path)) == instructions


def test_load_trace_skips_blank_lines_and_reports_bad_records():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "trace.jsonl"
        path.write_text('{"op": "deallocate", "block_id": 4}\n\n{"op": "resize"}\n', encoding="utf-8")
        loaded = load_trace(path)
        assert next(loaded) == DeallocationInstruction(4)
        with pytest.raises(ValueError, match=":3:"):
            next(loaded)


def test_load_trace_rejects_non_integer_fields_with_line_number():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "trace.jsonl"
        path.write_text('{"op": "allocate", "block_id": null, "dimension": 5}\n', encoding="utf-8")
        with pytest.raises(ValueError, match=":1:"):
            list(load_trace(path))


def test_instruction_records_reject_floats_and_bools():
    with pytest.raises(ValueError):
        Instruction.from_dict({"op": "allocate", "block_id": 1, "dimension": 2.9})
    with pytest.raises(ValueError):
        Instruction.from_dict({"op": "deallocate", "block_id": True})
    with pytest.raises(ValueError):
        Instruction.from_dict({"op": "deallocate", "block_id": [1]})


def test_instruction_records_validate_fields():
    with pytest.raises(ValueError):
        Instruction.from_dict({"op": "allocate", "block_id": 1})
    with pytest.raises(ValueError):
        AllocationInstruction(1, 0)
    assert str(AllocationInstruction(2, 3)) == "Allocate(id=2, size=3)"
    assert CompactInstruction() == CompactInstruction()
