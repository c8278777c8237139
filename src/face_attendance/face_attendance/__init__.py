"""Face Attendance package.

Organized by feature modules (employees, attendance, reconciliation, ...)
with a thin Flask controller layer over service/repository layers.
"""
