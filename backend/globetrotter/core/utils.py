"""
Utility functions for the application.
"""
from typing import Any, Dict


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response


def build_share_url(base_url: str, token: str) -> str:
    """Build the public link for a share token."""
    return f"{base_url.rstrip('/')}/shared/{token}"
