"""Aggregation module for daily reports.

- Reads launch records and daily counters, produces one DailyReport snapshot
- Forbidden: store mutation, transport calls
"""
