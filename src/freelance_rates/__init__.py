"""
Freelance Rates Package

A rate calculator for freelancers.
Turns monthly costs, working time, margin and tax into hourly → daily → weekly → monthly
rates, with optional project pricing and a bounded, persisted calculation history.
"""

__version__ = "1.0.0"
