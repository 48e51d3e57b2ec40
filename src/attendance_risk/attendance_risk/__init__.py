"""Attendance Risk package.

The analytics engine is organised by pipeline stage (records, metrics,
trend, patterns, risk) with a thin Flask report layer and a repository
seam over the attendance store.
"""
