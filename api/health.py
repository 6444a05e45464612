"""Health check endpoint (no auth, no store access)."""

from http.server import BaseHTTPRequestHandler
import json

from src.services.http_api import CORS_HEADERS, health_payload


class handler(BaseHTTPRequestHandler):
    """Liveness probe for the serverless deployment."""

    def _respond(self):
        self.send_response(200)
        self.send_header('Content-Type', 'application/json')
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(json.dumps(health_payload()).encode('utf-8'))

    def do_GET(self):
        self._respond()

    def do_POST(self):
        """Same as GET for health check."""
        self._respond()
