"""Render module for savings allocator output display."""

from render.renderers import (
    BaseRenderer,
    BreakdownRenderer,
    DashboardRenderer,
    AllocationsRenderer,
    LimitsRenderer,
    RENDERER_REGISTRY,
    SAVINGS_RATE_TARGET,
    format_currency,
    format_percent,
)

__all__ = [
    'BaseRenderer',
    'BreakdownRenderer',
    'DashboardRenderer',
    'AllocationsRenderer',
    'LimitsRenderer',
    'RENDERER_REGISTRY',
    'SAVINGS_RATE_TARGET',
    'format_currency',
    'format_percent',
]
