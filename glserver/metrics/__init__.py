"""Metric types, counters, derived statistics and crash reporting."""