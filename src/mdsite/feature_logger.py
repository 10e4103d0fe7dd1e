"""Centralized configuration and decision logging for the mdsite pipeline.

This module logs build configuration and error policy decisions for
debugging and troubleshooting. User-facing progress belongs to
ProgressReporter, and user-facing diagnostics belong to the Report.
"""

from __future__ import annotations

import logging
from typing import Any

from mdsite.model.site_options import SiteOptions

logger = logging.getLogger(__name__)


def log_site_configuration(options: SiteOptions) -> None:
    """Log the site build configuration.

    Args:
        options: Site options to log
    """
    logger.info("Site configuration:")
    logger.info("  Index document: %s", options.index)
    logger.info("  Source extension: %s", options.extension)
    logger.info("  Output extension: %s", options.output_extension)
    logger.info("  Path comparison: %s", options.path_case.value)
    logger.info("  Reader workers: %d", options.workers)


def log_feature_decision(
    feature: str, decision: str, context: dict[str, Any] | None = None
) -> None:
    """Log a processing decision.

    Args:
        feature: Name of the feature making the decision
        decision: The decision made (e.g., "case-insensitive", "skipped")
        context: Optional context information
    """
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        logger.info("%s: %s (%s)", feature, decision, context_str)
    else:
        logger.info("%s: %s", feature, decision)


def log_error_policy(
    feature: str, error_type: str, action: str, details: str | None = None
) -> None:
    """Log error handling policy decisions.

    Args:
        feature: Name of the stage encountering the error
        error_type: Type of error (e.g., "unresolved_link", "orphan")
        action: Action taken (e.g., "report", "abort", "continue")
        details: Optional additional details
    """
    if details:
        logger.warning("%s error policy: %s -> %s (%s)", feature, error_type, action, details)
    else:
        logger.warning("%s error policy: %s -> %s", feature, error_type, action)


__all__ = [
    "log_error_policy",
    "log_feature_decision",
    "log_site_configuration",
]
