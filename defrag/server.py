"""HTTP and WebSocket reassembly service using FastAPI.

Usage:
    uvicorn defrag.server:app --host 0.0.0.0 --port 8000

HTTP:
    POST /reassemble with a ReassembleRequest JSON body returns one
    ReassembledLine.

WebSocket Protocol:
    1. Client connects to /ws/reassemble
    2. Client sends FragmentRecord JSON messages, one per line of text
    3. Server streams a ReassembledLine JSON message back for each record,
       in the order the records were sent
    4. Client disconnects when done
"""

import asyncio
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError

from defrag.config import DEFAULT_CONFIG, ReassemblyConfig
from defrag.data_types import ErrorResponse, FragmentRecord, ReassembledLine, ReassembleRequest
from defrag.reassembly import Reassembler
from defrag.session import create_session

app = FastAPI(
    title="Defrag Server",
    description="Reconstructs lines of text from overlapping fragments",
    version="0.1.0",
)
app.state.config = DEFAULT_CONFIG


def get_config() -> ReassemblyConfig:
    """Server-wide reassembly configuration."""
    return app.state.config


def _request_config(base: ReassemblyConfig, request: ReassembleRequest) -> ReassemblyConfig:
    overrides = {}
    if request.delimiter is not None:
        overrides["delimiter"] = request.delimiter
    if request.allow_contained is not None:
        overrides["allow_contained"] = request.allow_contained
    if not overrides:
        return base
    return ReassemblyConfig(**(base.model_dump() | overrides))


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/reassemble")
async def reassemble_record(
    request: ReassembleRequest,
    config: Annotated[ReassemblyConfig, Depends(get_config)],
):
    """Reassemble a single record."""
    try:
        effective = _request_config(config, request)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid configuration: {e}") from e

    result = Reassembler(effective).run(request.record)
    line = ReassembledLine(
        text=result.text,
        sequence=request.sequence,
        fragment_count=result.fragment_count,
        merge_count=len(result.merges),
        complete=result.complete,
    )
    return line.model_dump(by_alias=True)


@app.websocket("/ws/reassemble")
async def websocket_reassemble(
    websocket: WebSocket,
    config: Annotated[ReassemblyConfig, Depends(get_config)],
):
    """WebSocket endpoint for streaming reassembly.

    Protocol:
        - Client sends: FragmentRecord JSON messages
        - Server sends: ReassembledLine JSON messages (ErrorResponse on bad input)
    """
    await websocket.accept()
    session = create_session(config)
    logger.info("Client connected")

    async def line_sender():
        try:
            while True:
                line = await session.get_line()
                await websocket.send_json(line.model_dump(by_alias=True))
        except asyncio.CancelledError:
            pass

    sender_task = asyncio.create_task(line_sender())

    try:
        while True:
            data = await websocket.receive_text()

            try:
                record = FragmentRecord.model_validate_json(data)
                await session.push_record(record)
            except ValidationError as e:
                logger.warning(f"Invalid FragmentRecord: {e}")
                response = ErrorResponse(
                    error=f"Invalid FragmentRecord: {e}",
                    code="INVALID_MESSAGE",
                )
                await websocket.send_json(response.model_dump(by_alias=True))

    except WebSocketDisconnect:
        logger.info("Client disconnected")
    except Exception as e:
        logger.exception("WebSocket error")
        try:
            response = ErrorResponse(error=str(e), code="INTERNAL_ERROR")
            await websocket.send_json(response.model_dump(by_alias=True))
        except Exception:
            pass
    finally:
        sender_task.cancel()
        try:
            await sender_task
        except asyncio.CancelledError:
            pass
        await session.close()
