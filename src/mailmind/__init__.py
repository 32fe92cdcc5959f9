"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

mailmind: governed AI text generation for an email assistant.

Basic usage::

    from mailmind import GovernorSettings, create_governor, GenerationRequest

    governor = create_governor(GovernorSettings.from_env())
    outcome = await governor.generate(GenerationRequest(prompt="Summarize ..."))
"""

from .llms import (
    CallGovernor,
    ConfigurationError,
    ErrorKind,
    Freshness,
    GenerationConfig,
    GenerationFailure,
    GenerationRequest,
    GenerationResult,
    GovernorSettings,
    RateLimitedError,
    UpstreamFailureError,
    create_governor,
)
from .summarize import SummarizationEndpoint, SummarizeInput, SummaryOutcome, SummaryStatus

__all__ = [
    "CallGovernor",
    "ConfigurationError",
    "ErrorKind",
    "Freshness",
    "GenerationConfig",
    "GenerationFailure",
    "GenerationRequest",
    "GenerationResult",
    "GovernorSettings",
    "RateLimitedError",
    "SummarizationEndpoint",
    "SummarizeInput",
    "SummaryOutcome",
    "SummaryStatus",
    "UpstreamFailureError",
    "create_governor",
]

__version__ = "0.1.0"
