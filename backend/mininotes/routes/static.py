"""
Mini Notes Backend — Front-end Shell
======================================

What:  Serves the HTML page that boots the React client at / and /index.html.
Why:   The client bundle is built and hosted separately; the API server only
       needs to hand out the shell that loads it.
"""

from starlette.requests import Request
from starlette.responses import HTMLResponse, Response

from mininotes.router import Router

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Mini Notes</title>
    <link rel="stylesheet" href="/styles.css">
</head>
<body>
    <div id="root"></div>
    <script type="module" src="/src/frontend/main.tsx"></script>
</body>
</html>
"""


def register_static_routes(router: Router) -> None:

    async def index(request: Request) -> Response:
        return HTMLResponse(INDEX_HTML)

    router.get("/", index)
    router.get("/index.html", index)
