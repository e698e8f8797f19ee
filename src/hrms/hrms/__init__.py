"""HRMS core package.

Organized by feature modules (profiles, attendance, leave, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""
