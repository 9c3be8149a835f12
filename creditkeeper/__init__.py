"""
CreditKeeper - Educational Credit Score Simulator

A deterministic scoring engine that turns a handful of financial signals
into a synthetic 300-850 score, a loan affordability classifier, and a
what-if projector for hypothetical purchases, payments and loans.
"""

__version__ = "0.1.0"
