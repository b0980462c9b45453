from __future__ import annotations

import csv
import json
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class MemoryProfiler:
    """
    Lightweight event logger for SimulationInstance.

    Every dispatched instruction produces one structured event (allocation,
    deallocation, compaction or instruction_failure) carrying heap usage and
    fragmentation at that point. Events can be flushed to disk as CSV and JSONL.
    """

    run_id: str
    output_dir: Optional[str] = None
    write_immediately: bool = False
    events: List[Dict[str, object]] = field(default_factory=list)

    def record_event(self, event_type: str, payload: Dict[str, object]) -> None:
        record = {
            "timestamp": time.time(),
            "run_id": self.run_id,
            "step": len(self.events) + 1,
            "event": event_type,
            **payload,
        }
        self.events.append(record)
        if self.write_immediately and self.output_dir:
            with self._path("jsonl").open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record) + "\n")

    def events_of(self, event_type: str) -> List[Dict[str, object]]:
        return [record for record in self.events if record["event"] == event_type]

    def event_counts(self) -> Dict[str, int]:
        return dict(Counter(str(record["event"]) for record in self.events))

    def peak_fragmentation(self) -> float:
        return max((float(record.get("fragmentation", 0.0)) for record in self.events), default=0.0)

    def flush(self) -> None:
        if not self.output_dir or not self.events:
            return
        if not self.write_immediately:
            with self._path("jsonl").open("w", encoding="utf-8") as handle:
                for record in self.events:
                    handle.write(json.dumps(record) + "\n")
        # Failure events carry instruction fields the other events lack.
        fieldnames = sorted({key for event in self.events for key in event.keys()})
        with self._path("csv").open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            writer.writeheader()
            writer.writerows(self.events)

    def _path(self, suffix: str) -> Path:
        output_path = Path(self.output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        return output_path / f"{self.run_id}.{suffix}"
