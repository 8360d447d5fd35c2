"""
Video ad summary service.

Turns an ad URL (plus optional pasted caption or dialogue) into a structured
creative breakdown via a single Gemini call.
"""

__version__ = "2.0.0"
