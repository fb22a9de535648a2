"""Payroll deduction and amortization engine.

Turns loans, salary advances, recurring mobile-bill charges, uniform
issuances and training costs into monthly payroll deductions.
"""

__version__ = "0.1.0"
