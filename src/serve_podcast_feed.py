import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional

from src.config import Settings, get_settings
from src.pipeline import FeedResponse, handle

logger = logging.getLogger(__name__)


class FeedRequestHandler(BaseHTTPRequestHandler):
    server_version = "soundsproxy/0.1"

    def _respond(self, send_body: bool = True):
        try:
            response = handle(self.command, self.path, self.server.settings)
        except Exception:
            logger.exception("Error handling %s %s", self.command, self.path)
            response = FeedResponse(500, "Internal Server Error")

        body = response.body.encode("utf-8")
        self.send_response(response.status)
        self.send_header("Content-Type", response.content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if send_body:
            self.wfile.write(body)

    def do_GET(self):
        self._respond()

    def do_HEAD(self):
        self._respond(send_body=False)

    def __getattr__(self, name):
        # Any other method, TRACE and custom verbs included, falls back to the greeting
        if name.startswith("do_"):
            return self.do_GET
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def log_message(self, format, *args):
        logger.info("%s - %s", self.address_string(), format % args)


class FeedServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, settings: Settings):
        self.settings = settings
        super().__init__((settings.host, settings.port), FeedRequestHandler)


def serve(settings: Optional[Settings] = None):
    settings = settings or get_settings()
    server = FeedServer(settings)
    host, port = server.server_address[:2]

    print(f"🎙️  Serving podcast feeds at http://{host}:{port}")
    print(f"Add this to your podcast app: http://{host}:{port}/<programme id>")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down")
    finally:
        server.server_close()
