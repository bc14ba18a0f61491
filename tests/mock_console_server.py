"""Mock console endpoint served on a Unix domain socket."""

from __future__ import annotations

import asyncio
from pathlib import Path


class MockConsoleServer:
    """Unix socket server standing in for a VM console pipe."""

    def __init__(self, path: Path | str, chunks: list[bytes] | None = None, chunk_delay_s: float = 0.02) -> None:
        """Initialize mock console server.

        Args:
            path: Socket path to listen on
            chunks: Byte chunks sent to each client, one write per chunk
            chunk_delay_s: Pause between chunk writes so they arrive separately
        """
        self.path = str(path)
        self.chunks = list(chunks or [])
        self.chunk_delay_s = chunk_delay_s
        self.server: asyncio.Server | None = None
        self.clients: list[asyncio.StreamWriter] = []
        self.received = bytearray()

    async def start(self) -> None:
        self.server = await asyncio.start_unix_server(self._handle_client, path=self.path)

    async def stop(self) -> None:
        # Server.wait_closed() waits for open connections on 3.12+.
        await self.close_clients()
        if self.server:
            self.server.close()
            await self.server.wait_closed()

    async def close_clients(self) -> None:
        for writer in list(self.clients):
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionResetError, BrokenPipeError):
                pass
        self.clients.clear()

    async def _handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.clients.append(writer)
        try:
            for chunk in self.chunks:
                writer.write(chunk)
                await writer.drain()
                await asyncio.sleep(self.chunk_delay_s)
            while True:
                data = await reader.read(1024)
                if not data:
                    break
                self.received.extend(data)
        except (ConnectionResetError, BrokenPipeError):
            pass

    async def __aenter__(self) -> MockConsoleServer:
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()
