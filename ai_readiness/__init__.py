"""
AI readiness self-assessment engine.

Scores an organization's answers along weighted dimensions, selects and
ranks recommendation content, and projects a rough valuation impact.
Every public operation is a pure function of its arguments.
"""

__version__ = "0.1.0"
