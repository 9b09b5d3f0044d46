"""
Flask integration: one tracer per request, ended when the response is ready.

Handlers add spans through ``current_tracer().mark(...)``. When
``QUICK_TRACE_SERVER_TIMING`` is enabled the spans are also reported to the
client in a ``Server-Timing`` header.
"""

import logging
import re
from typing import List, Optional

from flask import Flask, current_app, g, has_request_context, request

from ..core.options import TracerOptions, with_enabled
from ..core.tracer import Tracer
from ..core.types import Measurement, OutputStyle

logger = logging.getLogger(__name__)

# Keys read from app.config
CONFIG_DEFAULTS = {
    'QUICK_TRACE_ENABLED': True,
    'QUICK_TRACE_STYLE': None,
    'QUICK_TRACE_SERVER_TIMING': False,
}

_G_KEY = 'quick_tracer'
_TOKEN_UNSAFE = re.compile(r'[^A-Za-z0-9!#$%&\'*+.^_`|~-]+')


def current_tracer() -> Tracer:
    """
    Tracer of the request being handled.

    Outside a traced request this returns a fresh disabled tracer, so
    handlers can call mark() unconditionally.
    """
    if has_request_context():
        tracer = g.get(_G_KEY)
        if tracer is not None:
            return tracer
    return Tracer("untraced", with_enabled(False))


def server_timing_header(measurements: List[Measurement], limit: int = 20) -> str:
    """
    Build a Server-Timing header value from measurements.

    Args:
        measurements: Spans to report, in order
        limit: Maximum number of entries

    Returns:
        Header value such as 'load-cart;dur=12.50;desc="load cart"'
    """
    entries = []
    for index, m in enumerate(measurements[:limit]):
        token = _TOKEN_UNSAFE.sub('-', m.label).strip('-') or f"span{index}"
        desc = m.label.replace('\\', '\\\\').replace('"', '\\"')
        entries.append(f'{token};dur={m.duration_ms:.2f};desc="{desc}"')
    return ", ".join(entries)


class FlaskTracing:
    """Attaches a request-scoped Tracer to a Flask application."""

    def __init__(self, app: Optional[Flask] = None, options: Optional[TracerOptions] = None):
        """
        Initialize the extension.

        Args:
            app: Flask application (or call init_app later)
            options: Base options for every request tracer; QUICK_TRACE_*
                     config keys are applied on top
        """
        self.options = options or TracerOptions()
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        for key, value in CONFIG_DEFAULTS.items():
            app.config.setdefault(key, value)

        app.before_request(self._start_request)
        app.after_request(self._finish_request)
        app.extensions['quick_trace'] = self

    def _request_options(self, app: Flask) -> TracerOptions:
        overrides = TracerOptions(enabled=bool(app.config['QUICK_TRACE_ENABLED']))

        style = app.config['QUICK_TRACE_STYLE']
        if style:
            try:
                overrides = overrides.merge(TracerOptions(output_style=OutputStyle.parse(style)))
            except ValueError as e:
                logger.warning("Ignoring QUICK_TRACE_STYLE: %s", e)

        return self.options.merge(overrides)

    def _start_request(self) -> None:
        name = f"{request.method} {request.path}"
        g.setdefault(_G_KEY, Tracer(name, self._request_options(current_app)))

    def _finish_request(self, response):
        tracer = g.pop(_G_KEY, None)
        if tracer is None or not tracer.is_enabled():
            return response

        tracer.end()

        if current_app.config['QUICK_TRACE_SERVER_TIMING']:
            header = server_timing_header(tracer.get_measurements())
            total = f'total;dur={tracer.get_total_duration():.2f}'
            response.headers['Server-Timing'] = f"{header}, {total}" if header else total

        return response
