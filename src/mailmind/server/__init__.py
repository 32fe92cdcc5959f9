"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: server/__init__.py.
"""

from .app import MailmindServiceHost, create_app

__all__ = ["MailmindServiceHost", "create_app"]
