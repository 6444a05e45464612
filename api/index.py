"""Back-office REST API endpoint for Vercel (all routes)."""

from http.server import BaseHTTPRequestHandler, HTTPServer
import asyncio
import json
import logging
import os

from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
_logger = logging.getLogger(__name__)

# Built lazily so a missing env var fails the request, not the import
_api = None


def _get_api():
    global _api
    if _api is None:
        from src.services.http_api import HomeSpaceApi
        _api = HomeSpaceApi.default()
    return _api


class handler(BaseHTTPRequestHandler):
    """Vercel serverless function handler for the back-office API."""

    def _dispatch(self):
        content_length = int(self.headers.get('Content-Length', 0) or 0)
        raw_body = self.rfile.read(content_length) if content_length > 0 else b""

        try:
            result = asyncio.run(_get_api().handle(self.command, self.path, dict(self.headers.items()), raw_body))
        except Exception as e:
            _logger.error(f"API initialization failed: {e}")
            self.send_response(500)
            self.send_header('Content-Type', 'application/json')
            self.end_headers()
            self.wfile.write(json.dumps({"success": False, "error": "service initialization failed"}).encode('utf-8'))
            return

        self.send_response(result.status_code)
        for name, value in result.headers.items():
            self.send_header(name, value)
        self.end_headers()
        if result.body is not None:
            self.wfile.write(json.dumps(result.body).encode('utf-8'))

    def do_GET(self):
        """Handle GET request."""
        self._dispatch()

    def do_POST(self):
        """Handle POST request."""
        self._dispatch()

    def do_PUT(self):
        """Handle PUT request."""
        self._dispatch()

    def do_DELETE(self):
        """Handle DELETE request."""
        self._dispatch()

    def do_OPTIONS(self):
        """Handle CORS preflight."""
        self._dispatch()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "8000"))
    _logger.info(f"Serving back-office API on port {port}")
    HTTPServer(("", port), handler).serve_forever()
