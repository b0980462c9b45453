"""Workload generation, tracing and reporting around the simulator."""
