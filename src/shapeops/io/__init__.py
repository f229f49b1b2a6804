"""I/O utilities for shapeops."""

from .message_json import SCHEMA_ID, message_from_json, message_to_json

__all__ = ['SCHEMA_ID', 'message_to_json', 'message_from_json']
