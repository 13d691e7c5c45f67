"""
Stateless JSON API over the planning core.
"""

from nutriplan.web.app import create_app

__all__ = ["create_app"]
