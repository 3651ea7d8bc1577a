"""Attendance Tracker package.

This package is organized by feature modules (attendance, users, reports)
with a thin Flask controller layer over service/repository layers.
"""
