from __future__ import annotations

import os
import threading
import time
import unittest
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import patch


class SlowHandler(BaseHTTPRequestHandler):
    # Advertises a large body, then sends one byte every ``byte_interval`` seconds.
    byte_interval = 0.2
    send_body = True

    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Type", "application/octet-stream")
        self.send_header("Content-Length", "100000")
        self.end_headers()
        self.wfile.flush()
        stop_at = time.monotonic() + 5
        try:
            while time.monotonic() < stop_at:
                time.sleep(self.byte_interval)
                if self.send_body:
                    self.wfile.write(b"x")
                    self.wfile.flush()
        except OSError:
            pass

    def log_message(self, format, *args):
        return None


class StalledHandler(SlowHandler):
    send_body = False


def serve(test: unittest.TestCase, handler: type[BaseHTTPRequestHandler]) -> str:
    """Start ``handler`` on a loopback port for the duration of ``test``."""
    no_proxy = patch.dict(os.environ, {"no_proxy": "127.0.0.1,localhost", "NO_PROXY": "127.0.0.1,localhost"})
    no_proxy.start()
    test.addCleanup(no_proxy.stop)

    server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    test.addCleanup(thread.join, 2)
    test.addCleanup(server.server_close)
    test.addCleanup(server.shutdown)
    host, port = server.server_address[:2]
    return f"http://{host}:{port}/semanal-municipio-2024-2025.xlsx"
