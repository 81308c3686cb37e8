"""
Mindful Chat - An emotion-aware supportive chat service.

This package detects the emotion of each message, replies in one of several
personalities and translates Hindi input, falling back to local keyword
rules and static responses whenever the hosted generation API is unavailable.
"""

__version__ = "0.1.0"
