"""
Logging Setup

Sends the Flask app logger and the service-layer loggers to stdout with one
format, and logs every request/response pair.
"""

import logging
import sys
from flask import request, has_request_context

LOG_FORMAT = '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Module loggers created with logging.getLogger(__name__) under these packages
SERVICE_LOGGERS = ('services',)


def setup_logger(app):
    """
    Configure logging for the Flask application.

    Sets up:
    - Console output to stdout for ``app.logger`` and the service loggers
    - DEBUG level in debug mode, INFO otherwise
    - One log line per incoming request and per response

    Args:
        app: Flask application instance
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    level = logging.DEBUG if app.debug else logging.INFO

    app.logger.addHandler(handler)
    app.logger.setLevel(level)
    app.logger.propagate = False

    for name in SERVICE_LOGGERS:
        service_logger = logging.getLogger(name)
        # create_app may run many times in one process (tests)
        for existing in list(service_logger.handlers):
            if getattr(existing, '_newsroom_handler', False):
                service_logger.removeHandler(existing)
        handler._newsroom_handler = True
        service_logger.addHandler(handler)
        service_logger.setLevel(level)

    @app.before_request
    def log_request_info():
        """Log incoming request details."""
        if has_request_context():
            app.logger.info(
                f"Request: {request.method} {request.path} "
                f"from {request.remote_addr} "
                f"[User-Agent: {request.user_agent.string[:50]}...]"
            )

    @app.after_request
    def log_response_info(response):
        """Log response status."""
        if has_request_context():
            app.logger.info(
                f"Response: {response.status_code} for "
                f"{request.method} {request.path}"
            )
        return response

    app.logger.info(f"Logging configured - Level: {logging.getLevelName(app.logger.level)}")

    return app
