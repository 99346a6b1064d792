"""Attendance Tracker package.

Feature modules (ledger, analytics, users, tasks, ...) expose a thin Flask
controller layer over service/repository layers backed by JSON files.
"""
