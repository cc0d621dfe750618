"""WebSocket endpoint — live comments and likes for a job page.

Learn: Each job detail page connects to /ws/jobs/{job_id} and receives
the job's events (comment.added, comment.deleted, like.updated) as they
are published. The client may send {"type": "ping"} as a keepalive and
gets {"type": "pong"} back. Job activity is public, so no token is
needed to listen.

Without Redis there is nothing to forward; the socket is closed with
1013 ("try again later") and the page falls back to polling the API.
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from redis.asyncio.client import PubSub
from starlette.websockets import WebSocketState

from jobhub.realtime.pubsub import get_redis, job_channel

logger = structlog.get_logger()
router = APIRouter()

PONG = json.dumps({"type": "pong"})


async def _forward_events(websocket: WebSocket, pubsub: PubSub) -> None:
    async for message in pubsub.listen():
        if message["type"] == "message":
            await websocket.send_text(message["data"])


async def _answer_pings(websocket: WebSocket) -> None:
    """Read client frames until disconnect; non-JSON frames are ignored."""
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if isinstance(frame, dict) and frame.get("type") == "ping":
                await websocket.send_text(PONG)
    except WebSocketDisconnect:
        return


@router.websocket("/ws/jobs/{job_id}")
async def job_websocket(websocket: WebSocket, job_id: str):
    """Stream a job's activity to the client until either side hangs up."""
    try:
        redis = get_redis()
    except RuntimeError:
        await websocket.close(code=1013, reason="Real-time updates unavailable")
        return

    await websocket.accept()
    channel = job_channel(job_id)

    async with redis.pubsub() as pubsub:
        await pubsub.subscribe(channel)
        logger.debug("realtime.client_joined", job_id=job_id)

        tasks = {
            asyncio.create_task(_forward_events(websocket, pubsub)),
            asyncio.create_task(_answer_pings(websocket)),
        }
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            await pubsub.unsubscribe(channel)
            logger.debug("realtime.client_left", job_id=job_id)

    if websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close()
