"""HTTP API server for the cube simulator."""

from __future__ import annotations

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from .facade import BusyError, CubeFacade
from .moves import InvalidMoveError, format_sequence
from .state_codec import StateValidationError


class RequestError(ValueError):
    """Raised for malformed request bodies."""


class CubeHTTPServer:
    def __init__(self, facade: CubeFacade, host: str = "127.0.0.1", port: int = 8000):
        self.facade = facade

        handler_cls = self._build_handler()
        self.httpd = ThreadingHTTPServer((host, port), handler_cls)
        self.host, self.port = self.httpd.server_address[:2]

    def _build_handler(self):
        parent = self

        class Handler(BaseHTTPRequestHandler):
            server_version = "TwistySim/1.0"

            def log_message(self, fmt: str, *args):
                return

            def _send_json(self, code: int, payload: dict[str, Any]):
                body = json.dumps(payload).encode("utf-8")
                self.send_response(code)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def _read_json(self) -> dict[str, Any]:
                length = int(self.headers.get("Content-Length", "0"))
                if length == 0:
                    return {}
                data = self.rfile.read(length)
                try:
                    obj = json.loads(data.decode("utf-8"))
                except json.JSONDecodeError as exc:
                    raise RequestError(f"Invalid JSON body: {exc}") from exc
                if not isinstance(obj, dict):
                    raise RequestError("JSON body must be an object")
                return obj

            def do_GET(self):
                facade = parent.facade
                if self.path == "/health":
                    self._send_json(200, {"cube_size": facade.size, "busy": facade.busy, "ready": True})
                    return

                if self.path == "/state":
                    self._send_json(200, facade.state_payload())
                    return

                if self.path == "/solved":
                    self._send_json(200, {"solved": facade.is_solved()})
                    return

                if self.path == "/history":
                    self._send_json(
                        200,
                        {
                            "history": format_sequence(facade.history),
                            "can_undo": facade.can_undo,
                            "can_redo": facade.can_redo,
                        },
                    )
                    return

                self._send_json(404, {"error": "Not Found"})

            def do_POST(self):
                facade = parent.facade
                try:
                    body = self._read_json()

                    if self.path == "/move":
                        if "move" in body:
                            notation = body["move"]
                        elif "moves" in body:
                            notation = body["moves"]
                        else:
                            raise RequestError("Missing required field: move or moves")
                        if not isinstance(notation, str):
                            raise RequestError("move/moves must be a notation string")
                        moves = facade.apply_sequence(notation)
                        payload = facade.state_payload()
                        payload["applied"] = format_sequence(moves)
                        self._send_json(200, payload)
                        return

                    if self.path == "/scramble":
                        count = body.get("count")
                        seed = body.get("seed")
                        if count is not None and (not isinstance(count, int) or isinstance(count, bool) or count < 0):
                            raise RequestError("count must be a non-negative integer or null")
                        if seed is not None and (not isinstance(seed, int) or seed < 0):
                            raise RequestError("seed must be a non-negative integer or null")
                        moves = facade.scramble(count, seed=seed)
                        payload = facade.state_payload()
                        payload["applied"] = format_sequence(moves)
                        self._send_json(200, payload)
                        return

                    if self.path == "/solve":
                        moves = facade.solve()
                        payload = facade.state_payload()
                        payload["applied"] = format_sequence(moves)
                        self._send_json(200, payload)
                        return

                    if self.path in ("/undo", "/redo"):
                        done = facade.undo() if self.path == "/undo" else facade.redo()
                        payload = facade.state_payload()
                        payload["applied"] = done
                        self._send_json(200, payload)
                        return

                    if self.path == "/reset":
                        facade.reset()
                        self._send_json(200, facade.state_payload())
                        return

                    if self.path == "/state":
                        if "state" not in body:
                            raise RequestError("Missing required field: state")
                        facade.load_state(body["state"])
                        self._send_json(200, facade.state_payload())
                        return

                except (RequestError, InvalidMoveError, StateValidationError) as exc:
                    self._send_json(400, {"error": str(exc)})
                    return
                except BusyError as exc:
                    self._send_json(409, {"error": str(exc)})
                    return

                self._send_json(404, {"error": "Not Found"})

        return Handler

    def serve_forever(self):
        self.httpd.serve_forever()

    def start_background(self, daemon: bool = True) -> threading.Thread:
        thread = threading.Thread(target=self.serve_forever, daemon=daemon)
        thread.start()
        return thread

    def shutdown(self):
        self.httpd.shutdown()
        self.httpd.server_close()
