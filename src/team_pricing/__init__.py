"""
Team Pricing Package

Group-buy ("TEAM item") pricing for the parenting-assistant app.
Computes a step-discounted price from a live participant count, with
floor/cap guardrails, plus progress toward the next discount step.
"""

__version__ = "1.0.0"
