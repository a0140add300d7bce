# shared/http_proxy.py
import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Callable, Dict, Optional

import requests

StatusProvider = Callable[[], Dict[str, Any]]

HOP_BY_HOP = ("transfer-encoding", "connection", "content-encoding")


class ProofSidecarServer(HTTPServer):
    """HTTPServer carrying the routing config the handler needs."""

    def __init__(self, address, service_base: str, uagents_url: str,
                 status_provider: Optional[StatusProvider] = None):
        super().__init__(address, _ProxyHandler)
        self.service_base = service_base.rstrip("/")
        self.uagents_url = uagents_url.rstrip("/")
        self.status_provider = status_provider


class _ProxyHandler(BaseHTTPRequestHandler):
    server_version = "ProofSidecar/1.0"

    def _write(self, code=200, body="ok", ctype="text/plain"):
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
            ctype = "application/json"
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.send_response(code)
        self.send_header("Content-Type", ctype)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        base = self.server.service_base
        if self.path == f"{base}/health":
            return self._write(200, "ok")
        if self.path == f"{base}/status":
            provider = self.server.status_provider
            status = provider() if provider else {"processing": False, "error": None}
            return self._write(200, status)
        return self._write(404, "not found")

    def _proxy(self):
        base = self.server.service_base
        if not self.path.startswith(f"{base}/submit"):
            return self._write(404, "not found")

        # strip the service prefix so uAgents sees /submit...
        target = f"{self.server.uagents_url}{self.path[len(base):]}"

        length = int(self.headers.get("Content-Length", "0") or 0)
        data = self.rfile.read(length) if length else None
        headers = {"Content-Type": self.headers.get("Content-Type", "application/octet-stream")}

        try:
            resp = requests.request(self.command, target, headers=headers, data=data, timeout=10)
        except requests.RequestException as e:
            return self._write(502, f"proxy error: {e}")

        self.send_response(resp.status_code)
        for k, v in resp.headers.items():
            if k.lower() in HOP_BY_HOP:
                continue
            self.send_header(k, v)
        self.end_headers()
        self.wfile.write(resp.content)

    def do_POST(self): self._proxy()

    def log_message(self, fmt, *args):
        # health probes would flood container logs
        pass


def start_health_proxy(port: int, service_base: str, uagents_url: str,
                       status_provider: Optional[StatusProvider] = None,
                       host: str = "0.0.0.0") -> ProofSidecarServer:
    """Run the health/status/proxy server on <host>:<port> in a background thread."""
    server = ProofSidecarServer((host, port), service_base, uagents_url, status_provider)
    t = threading.Thread(target=server.serve_forever, name="proof-sidecar", daemon=True)
    t.start()
    return server
