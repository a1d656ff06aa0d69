"""Whistle punch-clock package.

Organized by feature modules (users, time_entries, aggregation) with a thin
Flask controller layer over service/repository layers.
"""
