"""
Duplex channel over a spawned engine's stdio.

The engine's stdin becomes an ActionSink and its stdout a ResponseStream.
The two halves share nothing but the process, so they are meant to be driven
from separate tasks:

    sink, stream = await start(EngineProcess("katago", ["analysis", ...]))

    async def read_all():
        async for item in stream:
            if isinstance(item, UnrecognizedResponse):
                ...  # bad line; iteration carries on
            else:
                by_id[item.id].append(item)

    reader = asyncio.create_task(read_all())
    await sink.send(query)
    await sink.close()   # engine sees EOF, stream drains to the end
    await reader

Responses for different ids interleave freely; matching them to requests by
`id` is left to the caller, as are timeouts and retries.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import IO, Dict, Iterable, List, Optional, Tuple, Union

from .codec import decode_response, encode_action
from .errors import SpawnError, UnrecognizedResponse, WriteError
from .models import Action, Response

LOGGER = logging.getLogger("kataclient.channel")

# Ownership-heavy results run far past asyncio's 64 KiB default
DEFAULT_LINE_LIMIT = 16 * 1024 * 1024

StreamItem = Union[Response, UnrecognizedResponse]


@dataclass
class EngineProcess:
    """What to run. Building the command line is up to the caller."""

    program: str
    args: List[str] = field(default_factory=list)
    cwd: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    # None inherits the parent's stderr; DEVNULL, PIPE or a file also work
    stderr: Union[int, IO[bytes], None] = None
    line_limit: int = DEFAULT_LINE_LIMIT

    @property
    def command(self) -> List[str]:
        return [self.program, *self.args]


class ActionSink:
    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, action: Action) -> None:
        """Encode and write one action, waiting while the pipe is full.

        An EncodeError leaves the sink usable since nothing was written.
        A WriteError means the engine's stdin is gone and closes the sink.
        """
        if self._closed:
            raise WriteError("Action sink is closed")
        data = encode_action(action)
        try:
            self._writer.write(data)
            await self._writer.drain()
        except OSError as exc:
            self._closed = True
            LOGGER.warning("sink_write_failed", extra={"action_id": action.id, "error": str(exc)})
            raise WriteError(f"Engine input closed while sending {action.id!r}: {exc}") from exc
        LOGGER.debug("action_sent", extra={"action_id": action.id, "size": len(data)})

    async def send_all(self, actions: Iterable[Action]) -> None:
        for action in actions:
            await self.send(action)

    async def close(self) -> None:
        """Close the engine's stdin. The response stream keeps running."""
        self._closed = True
        if self._writer.is_closing():
            return
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError as exc:
            # Engine was already gone; the pipe is closed either way
            LOGGER.debug("sink_close_broken_pipe", extra={"error": str(exc)})


class ResponseStream:
    """Async iterator of decoded responses in the order the engine wrote them.

    A line that cannot be decoded is yielded as an UnrecognizedResponse
    instead of being raised. EOF on stdout ends iteration.
    """

    def __init__(self, reader: asyncio.StreamReader, line_limit: int = DEFAULT_LINE_LIMIT) -> None:
        self._reader = reader
        self._line_limit = line_limit

    def __aiter__(self) -> "ResponseStream":
        return self

    async def __anext__(self) -> StreamItem:
        while True:
            try:
                raw = await self._reader.readline()
            except ValueError:
                # readline() has already discarded the oversized line
                LOGGER.warning("response_line_too_long", extra={"limit": self._line_limit})
                return UnrecognizedResponse("", f"Line exceeds {self._line_limit} bytes")
            except OSError as exc:
                LOGGER.warning("response_stream_failed", extra={"error": str(exc)})
                raise
            if not raw:
                LOGGER.debug("response_stream_eof")
                raise StopAsyncIteration
            if not raw.strip():
                continue
            try:
                response = decode_response(raw)
            except UnrecognizedResponse as exc:
                LOGGER.warning("response_unrecognized", extra={"reason": exc.reason, "line": exc.line[:200]})
                return exc
            LOGGER.debug("response_received", extra={"response_id": response.id, "kind": type(response).__name__})
            return response


class DuplexChannel:
    """Sole owner of one engine process and both of its pipes."""

    def __init__(self, process: asyncio.subprocess.Process, line_limit: int = DEFAULT_LINE_LIMIT) -> None:
        if process.stdin is None or process.stdout is None:
            raise ValueError("stdin/stdout must be piped")
        self.process = process
        self.sink = ActionSink(process.stdin)
        self.stream = ResponseStream(process.stdout, line_limit)

    @classmethod
    async def spawn(cls, engine: EngineProcess) -> "DuplexChannel":
        command = engine.command
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=engine.stderr,
                cwd=engine.cwd,
                env=engine.env,
                limit=engine.line_limit,
            )
        except OSError as exc:
            LOGGER.warning("engine_spawn_failed", extra={"command": command, "error": str(exc)})
            raise SpawnError(f"Cannot start engine {engine.program!r}: {exc}", command) from exc
        LOGGER.info("engine_spawned", extra={"command": command, "pid": process.pid})
        return cls(process, engine.line_limit)

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> Optional[int]:
        return self.process.returncode

    async def wait(self) -> int:
        return await self.process.wait()


async def start(engine: EngineProcess) -> Tuple[ActionSink, ResponseStream]:
    channel = await DuplexChannel.spawn(engine)
    return channel.sink, channel.stream
