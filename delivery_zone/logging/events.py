"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Event Naming Convention:
    <context>.<action>

    context: geometry, overlap, zone(s), windows, eligibility, config

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.zone_id
    | filter event = "zone.skipped"
    | stats count() by metadata.zone_id
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - geometry.*: Upload normalization
    - overlap.* / zones.*: Operator-side conflict detection and merging
    - windows.* / eligibility.*: Order-time resolution
    - config.*: Engine configuration
    """

    # ========== Geometry Events ==========
    GEOMETRY_NORMALIZED = "geometry.normalized"
    """Payload accepted as Polygon or MultiPolygon."""

    GEOMETRY_REJECTED = "geometry.rejected"
    """Payload rejected (unsupported kind or malformed structure)."""

    # ========== Operator Events ==========
    OVERLAP_DETECTED = "overlap.detected"
    """Candidate shape overlaps one or more existing zones."""

    ZONE_SKIPPED = "zone.skipped"
    """Zone could not be evaluated and was left out of a computation."""

    ZONES_MERGED = "zones.merged"
    """Two zone shapes were unioned."""

    ZONES_MERGE_FAILED = "zones.merge_failed"
    """Union of two zone shapes failed."""

    # ========== Resolution Events ==========
    WINDOWS_MERGED = "windows.merged"
    """Delivery windows fused for one weekday."""

    ELIGIBILITY_RESOLVED = "eligibility.resolved"
    """Eligibility verdict produced for a point."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Engine configuration loaded and validated."""
