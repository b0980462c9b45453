from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Iterator, Union

from contiguous_memory import Instruction


def load_trace(path: Union[str, Path]) -> Iterator[Instruction]:
    """Yield instructions from a JSON-lines trace, one record per line."""
    with Path(path).open("r", encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{line_number}: invalid JSON ({exc.msg})") from exc
            if not isinstance(record, dict):
                raise ValueError(f"{path}:{line_number}: expected an object, got {type(record).__name__}")
            try:
                yield Instruction.from_dict(record)
            except ValueError as exc:
                raise ValueError(f"{path}:{line_number}: {exc}") from exc


def write_trace(path: Union[str, Path], instructions: Iterable[Instruction]) -> int:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with output.open("w", encoding="utf-8") as handle:
        for instruction in instructions:
            handle.write(json.dumps(instruction.to_dict()) + "\n")
            written += 1
    return written
