"""Hostel portal notification service.

Ensures the local ``hostel_notify`` package is resolved as a regular package
rather than a namespace package.
"""
