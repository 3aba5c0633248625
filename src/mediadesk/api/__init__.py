"""API module for mediadesk.

- Maps HTTP calls 1:1 onto lifecycle manager operations
- Translates service errors into status codes
- Forbidden: SQL queries, transition rules
"""
