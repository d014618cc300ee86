"""OPTIONS and GET route handlers for the bridge endpoint."""


def do_OPTIONS(self):  # noqa: N802
    """CORS preflight: empty 200 on the bridge path."""
    if not self._is_bridge_path():
        self._text(404, "404 page not found")
        return
    self._send(200, b"")


def do_GET(self):  # noqa: N802
    if not self._is_bridge_path():
        self._text(404, "404 page not found")
        return
    self._text(405, "Method not allowed", (("Allow", "POST, OPTIONS"),))
