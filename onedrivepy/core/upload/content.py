"""
Upload content sources.

Each source reports its size up front and is read sequentially in windows,
so that large contents never have to be held in memory at once.
"""
import os
import asyncio
from pathlib import Path
from typing import Optional, Union, BinaryIO, Any

import aiofiles

from ..logging import get_logger
from .protocols import UploadContent

logger = get_logger('onedrivepy.upload.content')


class BytesContent:
    """
    In-memory content.

    Strings are encoded as UTF-8.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview, str]):
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._data = memoryview(bytes(data))
        self._position = 0

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def position(self) -> int:
        return self._position

    async def read(self, n: int) -> bytes:
        if n <= 0:
            return b''
        chunk = self._data[self._position:self._position + n]
        self._position += len(chunk)
        return chunk.tobytes()

    async def close(self) -> None:
        pass


class StreamContent:
    """
    Content read from a synchronous binary stream.

    The size of a seekable stream is measured from its current position to
    its end; non-seekable streams need an explicit size. Reads run in the
    default executor so that file streams do not block the event loop.
    """

    def __init__(self, stream: BinaryIO, size: Optional[int] = None, close_stream: bool = False):
        """
        Initialize stream content.

        Args:
            stream: Binary stream positioned at the first byte to upload
            size: Number of bytes to upload (measured when omitted)
            close_stream: Whether close() also closes the stream

        Raises:
            ValueError: If the size cannot be determined
        """
        self._stream = stream
        self._close_stream = close_stream
        self._size = size if size is not None else self._measure(stream)
        self._consumed = 0

    @staticmethod
    def _measure(stream: BinaryIO) -> int:
        seekable = getattr(stream, 'seekable', None)
        if seekable is None or not seekable():
            raise ValueError(
                "Content size must be known: pass size for non-seekable streams"
            )
        current = stream.tell()
        end = stream.seek(0, os.SEEK_END)
        stream.seek(current, os.SEEK_SET)
        return end - current

    @property
    def size(self) -> int:
        return self._size

    def _read_window(self, n: int) -> bytes:
        parts = []
        remaining = n
        while remaining > 0:
            data = self._stream.read(remaining)
            if not data:
                break
            parts.append(data)
            remaining -= len(data)
        return b''.join(parts)

    async def read(self, n: int) -> bytes:
        if n <= 0:
            return b''
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, self._read_window, n)
        self._consumed += len(data)
        return data

    async def close(self) -> None:
        if self._close_stream:
            self._stream.close()


class FileContent:
    """
    Content read from a local file with aiofiles.

    The file handle is opened on the first read and kept open until close(),
    avoiding repeated open/close operations between ranges.
    """

    def __init__(self, file_path: Union[str, os.PathLike]):
        """
        Initialize file content.

        Args:
            file_path: Path to the file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        self._path = path
        self._size = path.stat().st_size
        self._file_handle: Optional[Any] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def size(self) -> int:
        return self._size

    async def read(self, n: int) -> bytes:
        if n <= 0:
            return b''

        if self._file_handle is None:
            self._file_handle = await aiofiles.open(self._path, 'rb')

        parts = []
        remaining = n
        while remaining > 0:
            data = await self._file_handle.read(remaining)
            if not data:
                break
            parts.append(data)
            remaining -= len(data)

        data = b''.join(parts)
        if data:
            logger.debug(f"Read {len(data)} bytes from {self._path.name}")
        return data

    async def close(self) -> None:
        if self._file_handle is not None:
            await self._file_handle.close()
            self._file_handle = None


def as_content(content: Any, size: Optional[int] = None) -> UploadContent:
    """
    Wrap a supported object into an upload content source.

    Args:
        content: UploadContent, bytes-like, str, path (Path / os.PathLike)
            or binary stream
        size: Explicit size for streams that cannot be measured

    Returns:
        Upload content source

    Raises:
        TypeError: If the object is not a supported content
        ValueError: If the size of a stream cannot be determined
    """
    if isinstance(content, (BytesContent, StreamContent, FileContent)):
        return content

    if isinstance(content, (bytes, bytearray, memoryview, str)):
        return BytesContent(content)

    if isinstance(content, os.PathLike):
        return FileContent(content)

    if isinstance(content, UploadContent):
        return content

    if hasattr(content, 'read'):
        return StreamContent(content, size=size)

    raise TypeError(f"Unsupported upload content: {type(content).__name__}")
