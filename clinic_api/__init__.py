"""
Clinic Scheduling API

A FastAPI backend for a clinic: patients book, update and cancel
appointments, doctors review their day and issue prescriptions, and
administrators manage the doctor roster. Access is gated by role-scoped
bearer tokens carried in the request path.
"""

__version__ = "1.0.0"
