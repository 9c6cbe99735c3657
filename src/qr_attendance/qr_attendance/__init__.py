"""QR Attendance package.

This package is organized by feature modules (sessions, scans, ledger, ...)
with a thin Flask controller layer on top of service/repository layers.
"""
