"""
Service Layer - Business logic layer between the channel and the core.

Services orchestrate the decode, edit, merge and encode stages and provide
a clean interface for the method channel.
"""

from .editor_service import EditorService

__all__ = ["EditorService"]
