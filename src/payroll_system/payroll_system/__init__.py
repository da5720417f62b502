"""Payroll System package.

Feature modules (attendance, leave, sessions, recap, payroll, ...) keep their
business rules in service/aggregator classes behind repository protocols,
with a thin Flask controller layer on top.
"""
