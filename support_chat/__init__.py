"""
Conversation orchestration engine for an AI customer-support assistant.
"""

__version__ = "0.1.0"
