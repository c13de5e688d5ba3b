"""Timeclock and payroll engine.

This package is organized by feature modules (entries, approvals, salary,
pay_periods, employees, clock, payroll) with a thin Flask controller layer
over service/repository layers.
"""
