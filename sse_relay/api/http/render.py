"""Demo page that opens an event stream and prints every received line."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

router = APIRouter()

DEMO_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>SSE Client</title>
</head>
<body>
    <h1>Server-Sent Events Demo</h1>
    <div id="events"></div>

    <script>
        const eventSource = new EventSource('/events');

        eventSource.onmessage = function(e) {
            console.log(e.data);
            const eventDiv = document.getElementById('events');
            const p = document.createElement('p');
            p.textContent = e.data;
            eventDiv.appendChild(p);
        };

        eventSource.onerror = function(e) {
            console.error('SSE error:', e);
        };
    </script>
</body>
</html>
"""


@router.get(
    "/render",
    response_class=HTMLResponse,
    summary="Event stream demo page",
    tags=["demo"],
)
async def render() -> HTMLResponse:
    return HTMLResponse(DEMO_PAGE)
