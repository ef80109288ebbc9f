"""
latency.py
----------
Collects per-request latencies while the client runs and summarises them
when the run is interrupted.
"""

import time
from typing import Dict, List

import numpy as np


class LatencyCollector:
    def __init__(self):
        self.samples: List[float] = []
        self.failures = 0
        self.start_time = time.time()

    def add(self, latency_ms: float):
        self.samples.append(latency_ms)

    def add_failure(self):
        self.failures += 1

    def summary(self) -> Dict[str, float]:
        data = {
            "requests": len(self.samples),
            "failures": self.failures,
            "duration_s": time.time() - self.start_time,
        }
        if self.samples:
            arr = np.asarray(self.samples)
            data.update(
                mean_ms=float(np.mean(arr)),
                median_ms=float(np.median(arr)),
                p95_ms=float(np.percentile(arr, 95)),
                min_ms=float(np.min(arr)),
                max_ms=float(np.max(arr)),
            )
        return data

    def report(self) -> str:
        s = self.summary()
        lines = [
            f"Requests: {s['requests']} ok, {s['failures']} failed "
            f"in {s['duration_s']:.1f} s",
        ]
        if self.samples:
            lines.append(
                f"Latency (ms): mean {s['mean_ms']:.1f} | median {s['median_ms']:.1f} "
                f"| p95 {s['p95_ms']:.1f} | min {s['min_ms']:.1f} | max {s['max_ms']:.1f}"
            )
        return "\n".join(lines)
