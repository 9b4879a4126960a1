"""Staff time clock & payroll package.

Organized by feature modules (timeclock, rates, holidays, payroll, kiosk, ...)
with a thin Flask controller layer on top of service/repository layers.
"""
