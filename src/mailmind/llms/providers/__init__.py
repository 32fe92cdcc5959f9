"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/__init__.py.
"""

from .contracts import TextGenerator
from .litellm import LiteLLMTextGenerator

__all__ = ["TextGenerator", "LiteLLMTextGenerator"]
