"""
==============================================================================
Scanner WebSocket Module
==============================================================================

Interactive scanning surface over a WebSocket connection.

Each connection owns one ScanSession. The client reports focus changes
and scan events; the server pushes session state and feedback patterns.

Protocol:
---------
Client -> server:
    {"type": "focus"}
    {"type": "blur"}
    {"type": "scan", "raw_text": "SR1001|2500|50", "symbology": "CODE128"}
    {"type": "frame", "frame": "<base64 image>"}
    {"type": "stop"}

Server -> client:
    {"type": "state", "state": {...}}
    {"type": "feedback", "pattern": "accept" | "success" | "error"}
    {"type": "error", "code": "...", "message": "..."}

==============================================================================
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from stockscan.core.dependencies import (
    get_optical_decoder,
    get_product_resolver,
    get_session_timings,
)
from stockscan.scanner import ImageDecodeError, OpticalDecoder, ProductResolver
from stockscan.session import (
    FeedbackPattern,
    FeedbackSink,
    ScanSession,
    SessionState,
    SessionTimings,
)


# Module logger
logger = logging.getLogger(__name__)

router = APIRouter()


class WebSocketFeedback(FeedbackSink):
    """Feedback sink that queues patterns for the client."""
    
    def __init__(self, outbox: asyncio.Queue):
        self._outbox = outbox
    
    def emit(self, pattern: FeedbackPattern) -> None:
        self._outbox.put_nowait({"type": "feedback", "pattern": pattern.value})


class ScannerWebSocketHandler:
    """
    Handler for scanning-surface WebSocket connections.
    
    Manages the lifecycle of a scan session including:
    - Focus / blur driven resets
    - Scan text and camera frame events
    - State and feedback reporting
    """
    
    def __init__(
        self,
        websocket: WebSocket,
        resolver: ProductResolver,
        decoder: OpticalDecoder,
        timings: SessionTimings,
    ):
        self._websocket = websocket
        self._decoder = decoder
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._session = ScanSession(
            resolver,
            feedback=WebSocketFeedback(self._outbox),
            timings=timings,
            on_change=self._publish_state,
        )
    
    def _publish_state(self, state: SessionState) -> None:
        self._outbox.put_nowait({"type": "state", "state": state.to_dict()})
    
    async def _pump(self) -> None:
        """Forward queued messages to the client."""
        while True:
            message = await self._outbox.get()
            await self._websocket.send_json(message)
    
    async def send_error(self, message: str, code: str = "ERROR") -> None:
        """Send error message to client."""
        await self._websocket.send_json({
            "type": "error",
            "code": code,
            "message": message
        })
    
    async def handle_frame(self, data: dict) -> None:
        """Decode a camera frame and feed every symbol to the session."""
        frame = data.get("frame")
        if not isinstance(frame, str):
            await self.send_error("Frame must be a base64 string", "INVALID_FRAME")
            return
        
        try:
            events = self._decoder.decode_base64(frame)
        except ImageDecodeError as e:
            await self.send_error(str(e), "INVALID_FRAME")
            return
        
        # The session drops everything after the first accepted symbol
        for event in events:
            self._session.scan(event.raw_text, event.symbology)
    
    async def handle_message(self, data: dict) -> bool:
        """
        Handle one client message.
        
        Returns:
            False when the client asked to stop
        """
        if not isinstance(data, dict):
            await self.send_error("Message must be a JSON object", "UNKNOWN_MESSAGE")
            return True
        
        message_type = data.get("type")
        
        if message_type == "scan":
            self._session.scan(str(data.get("raw_text", "")), str(data.get("symbology", "")))
        elif message_type == "frame":
            await self.handle_frame(data)
        elif message_type == "focus":
            self._session.focus()
        elif message_type == "blur":
            self._session.blur()
        elif message_type == "stop":
            logger.info("🛑 Client requested stop")
            return False
        else:
            await self.send_error(f"Unknown message type: {message_type}", "UNKNOWN_MESSAGE")
        
        return True
    
    async def run(self) -> None:
        """Main handler loop."""
        await self._websocket.accept()
        logger.info("📱 Scanner WebSocket connected")
        
        pump = asyncio.create_task(self._pump())
        self._publish_state(self._session.state)
        
        try:
            while True:
                data = await self._websocket.receive_json()
                if not await self.handle_message(data):
                    break
        
        except WebSocketDisconnect:
            logger.info("📱 Client disconnected")
        finally:
            self._session.close()
            pump.cancel()
            logger.info("✅ Scanner WebSocket closed")


@router.websocket("/ws/scan")
async def websocket_scan(
    websocket: WebSocket,
    resolver: ProductResolver = Depends(get_product_resolver),
    decoder: OpticalDecoder = Depends(get_optical_decoder),
    timings: SessionTimings = Depends(get_session_timings),
):
    """Interactive barcode scanning session."""
    handler = ScannerWebSocketHandler(websocket, resolver, decoder, timings)
    await handler.run()
