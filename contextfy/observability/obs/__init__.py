"""User-facing observability API (span/event/metric)."""

from .api import event, get_sink, metric, set_sink, span, with_stage

__all__ = ["span", "event", "metric", "set_sink", "get_sink", "with_stage"]
