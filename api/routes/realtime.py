# api/routes/realtime.py
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool

from core.sa.database import Database, get_database
from core.services.notifier import PendingCountNotifier
from core.session import Identity, SessionContext, ensure_profile_on_sign_in

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])

@router.websocket("/ws/pending-count")
async def pending_count_feed(
    websocket: WebSocket,
    user_id: str = Query(...),
    email: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    database: Database = Depends(get_database)
):
    """Push {"pending": n} on connect and after every borrow request change."""
    await websocket.accept()
    loop = asyncio.get_running_loop()
    counts: asyncio.Queue = asyncio.Queue()

    context = SessionContext()
    notifier = PendingCountNotifier(database)
    notifier.add_listener(lambda count: loop.call_soon_threadsafe(counts.put_nowait, count))
    stop_profiles = ensure_profile_on_sign_in(context, database)
    notifier.attach(context)

    receiver = asyncio.ensure_future(websocket.receive())
    try:
        await run_in_threadpool(context.sign_in, Identity(id=user_id, email=email, full_name=name))
        while True:
            getter = asyncio.ensure_future(counts.get())
            done, _ = await asyncio.wait({receiver, getter}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                await websocket.send_json({"pending": getter.result()})
            else:
                getter.cancel()
            if receiver in done:
                if receiver.result()["type"] == "websocket.disconnect":
                    break
                receiver = asyncio.ensure_future(websocket.receive())
    except WebSocketDisconnect:
        pass
    finally:
        receiver.cancel()
        await run_in_threadpool(context.sign_out)
        notifier.close()
        stop_profiles()
        logger.info(f"Pending count feed closed for {user_id}")
