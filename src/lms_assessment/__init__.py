# src/lms_assessment/__init__.py
"""Assignment catalog, submissions, auto-grading and the grade ledger of a school LMS."""

__version__ = "0.1.0"
