"""Pull-style XML tokenizer for analyzer documents.

The reader turns a binary stream into a lazy sequence of ``Token`` values
(start-element, text, end-element). Start tokens carry the line of their
start tag; text and end tokens carry the line the tokenizer was on when the
element closed. It reads fixed-size chunks, feeds them to
``lxml.etree.XMLPullParser`` one line at a time and discards every element
once its end tag has been emitted, so memory use does not grow with the
number of issues in the document.

Text is only reported for elements without children (leaf elements); the
text of structural elements is whitespace in valid documents and is dropped.

Classes
-------
TokenKind : Token type tag
Token : One reader event
DocumentReader : Chunked tokenizer over a binary stream

Examples
--------
>>> import io
>>> reader = DocumentReader(io.BytesIO(b"<A><B>x</B></A>"), "mem.xml")
>>> [(t.kind.value, t.name, t.text) for t in reader]
[('start', 'A', ''), ('start', 'B', ''), ('text', 'B', 'x'), ('end', 'B', ''), ('end', 'A', '')]
>>> reader.close()

See Also
--------
fsauditor.core.models.parsers.analysis_output : Consumer of the tokens
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Iterator, Optional

from lxml import etree

from fsauditor.core.exceptions import StreamFailure
from fsauditor.core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

# lxml appends the location to libxml2's message
_LOCATION_SUFFIX = re.compile(r",\s*line \d+, column \d+\s*$")


class TokenKind(str, Enum):
    START = "start"
    TEXT = "text"
    END = "end"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    name: str
    text: str = ""
    line: int = 0

    @classmethod
    def start(cls, name: str, line: int = 0) -> "Token":
        return cls(TokenKind.START, name, "", line)

    @classmethod
    def end(cls, name: str, line: int = 0) -> "Token":
        return cls(TokenKind.END, name, "", line)

    @classmethod
    def characters(cls, name: str, text: str, line: int = 0) -> "Token":
        return cls(TokenKind.TEXT, name, text, line)


class DocumentReader:
    """Chunked pull tokenizer over a binary stream.

    The reader does not own ``stream``; the caller closes it. ``close()``
    finalizes the underlying XML parser and raises ``StreamFailure`` when the
    document turned out not to be well-formed after the last chunk.

    Parameters
    ----------
    stream : BinaryIO
        Readable binary stream positioned at the start of the document.
    source_path : str
        Name used in diagnostics.
    chunk_size : int, optional
        Bytes per read. Default is DEFAULT_CHUNK_SIZE.
    """

    def __init__(
        self,
        stream: BinaryIO,
        source_path: str,
        *,
        chunk_size: Optional[int] = None,
    ) -> None:
        self.stream = stream
        self.source_path = source_path
        self.chunk_size = chunk_size or DEFAULT_CHUNK_SIZE
        # line of the last token; after exhaustion, the line the input ended on
        self.line = 0
        self._parser = etree.XMLPullParser(
            events=("start", "end"),
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            remove_pis=True,
        )
        self._position = 1
        self._after_cr = False
        self._exhausted = False
        self._finish_error: Optional[etree.XMLSyntaxError] = None
        self._closed = False

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        """Yield tokens until the stream is exhausted.

        A malformed document raises ``StreamFailure`` from the chunk that
        contains the error. A document that simply stops (missing closing
        tags) ends the iteration with ``line`` set to where the input ended,
        so the consumer can report where it was.
        """
        while True:
            try:
                chunk = self.stream.read(self.chunk_size)
            except OSError as exc:
                raise StreamFailure(
                    f"Failed to read analysis file: {exc}",
                    source_path=self.source_path,
                    line=self.line or None,
                ) from exc

            if not chunk:
                break

            for piece in chunk.splitlines(keepends=True):
                try:
                    self._parser.feed(piece)
                except etree.XMLSyntaxError as exc:
                    raise self._syntax_failure(exc) from exc
                yield from self._drain()
                self._advance(piece)

        # flush whatever the parser still holds; a truncated document fails
        # here and is reported by close() unless something else already failed
        try:
            self._parser.close()
        except etree.XMLSyntaxError as exc:
            self._finish_error = exc
        yield from self._drain()
        self.line = self._position
        self._exhausted = True

    def _advance(self, piece: bytes) -> None:
        if piece.endswith((b"\n", b"\r")) and not (piece == b"\n" and self._after_cr):
            self._position += 1
        self._after_cr = piece.endswith(b"\r")

    def _drain(self) -> Iterator[Token]:
        for event, element in self._parser.read_events():
            if not isinstance(element.tag, str):
                continue
            name = etree.QName(element).localname
            if event == "start":
                self.line = element.sourceline or self._position
                yield Token.start(name, self.line)
                continue

            self.line = self._position
            if len(element) == 0 and element.text:
                yield Token.characters(name, element.text, self.line)
            yield Token.end(name, self.line)

            # drop finished subtrees; the consumer only ever sees tokens
            element.clear(keep_tail=False)
            parent = element.getparent()
            if parent is not None:
                while element.getprevious() is not None:
                    del parent[0]

    def _syntax_failure(self, exc: etree.XMLSyntaxError) -> StreamFailure:
        reason = _LOCATION_SUFFIX.sub("", exc.msg or str(exc))
        return StreamFailure(
            f"Malformed XML: {reason}",
            source_path=self.source_path,
            line=exc.lineno or self._position,
        )

    def close(self) -> None:
        """Finalize the reader.

        Raises
        ------
        StreamFailure
            When the stream was fully consumed but the XML parser rejected
            the end of the document.
        """
        if self._closed:
            return
        self._closed = True
        if self._exhausted and self._finish_error is not None:
            exc = self._finish_error
            raise self._syntax_failure(exc) from exc

    def __enter__(self) -> "DocumentReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except StreamFailure as close_error:
            logger.warning("Ignoring reader close failure for %s: %s", self.source_path, close_error)


__all__ = ["DEFAULT_CHUNK_SIZE", "Token", "TokenKind", "DocumentReader"]
