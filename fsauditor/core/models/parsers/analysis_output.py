"""Parser for F# analyzer ``AnalysisOutput`` documents.

The analyzer writes its findings to an XML document with a fixed schema::

    <AnalysisOutput>
      <Issues>
        <Issue>
          <RuleKey>...</RuleKey>
          <Message>...</Message>
          <AbsoluteFilePath>...</AbsoluteFilePath>
          <StartLine>3</StartLine>
          <StartColumn>1</StartColumn>
          <EndLine>3</EndLine>
          <EndColumn>10</EndColumn>
        </Issue>
      </Issues>
    </AnalysisOutput>

This module reads it with an explicit state machine over the tokens of
``DocumentReader``. All parse state lives in a ``ParserContext`` created per
call and threaded through the state functions, so the machine can be driven
with any token iterable.

The four position leaves are optional: an empty leaf and a missing leaf both
yield ``None``. The three text leaves are required.

Functions
---------
parse_analysis_output : Parse a document, returning ParseSuccess or ParseFailure
load_analysis_output : Same, raising the AnalysisParseError on failure
parse_tokens : Run the state machine over an iterable of tokens

Examples
--------
>>> result = parse_analysis_output("work/sonarDiagnostics.xml")
>>> if result.ok:
...     issues = result.issues
... else:
...     print(result.error)

See Also
--------
fsauditor.core.models.parsers.reader : Tokenizer
fsauditor.infra.documents.analysis_output : Writer for the same schema
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from fsauditor.core.exceptions import (
    AnalysisParseError,
    InvalidInteger,
    PrematureEnd,
    SchemaViolation,
    StreamFailure,
)
from fsauditor.core.logging_config import get_logger

from .common import Issue, ParseFailure, ParseResult, ParseSuccess
from .reader import DocumentReader, Token, TokenKind

logger = get_logger(__name__)

ANALYSIS_OUTPUT = "AnalysisOutput"
ISSUES = "Issues"
ISSUE = "Issue"
RULE_KEY = "RuleKey"
MESSAGE = "Message"
ABSOLUTE_FILE_PATH = "AbsoluteFilePath"
POSITION_ELEMENTS = ("StartLine", "StartColumn", "EndLine", "EndColumn")

_INT_RE = re.compile(r"[+-]?[0-9]+")
INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1


class ParserState(str, Enum):
    ROOT = "ROOT"
    AT_ANALYSIS_OUTPUT = "AT_ANALYSIS_OUTPUT"
    ISSUES = "ISSUES"
    ISSUE = "ISSUE"
    DONE = "DONE"


@dataclass
class ParserContext:
    """Mutable state of one parse.

    ``line`` is the line of the last consumed token, or the line the input
    ended on once ``reader`` is exhausted; ``state`` is the state the machine
    is in. One token of lookahead is kept in ``_lookahead``.
    """

    source_path: str
    tokens: Iterator[Token]
    state: ParserState = ParserState.ROOT
    line: int = 0
    issues: List[Issue] = field(default_factory=list)
    reader: Optional[DocumentReader] = None
    _lookahead: Optional[Token] = None

    def next_token(self, *, skip_text: bool = True) -> Optional[Token]:
        """Consume and return the next token, or None at end of stream."""
        while True:
            if self._lookahead is not None:
                token, self._lookahead = self._lookahead, None
            else:
                token = next(self.tokens, None)
            if token is None:
                if self.reader is not None and self.reader.line:
                    self.line = self.reader.line
                return None
            if token.line:
                self.line = token.line
            if skip_text and token.kind is TokenKind.TEXT:
                continue
            return token

    def peek_token(self) -> Optional[Token]:
        """Return the next non-text token without consuming it."""
        if self._lookahead is None:
            self._lookahead = self.next_token()
        return self._lookahead

    def violation(
        self, reason: str, *, expected: Optional[str] = None, found: Optional[str] = None
    ) -> SchemaViolation:
        return SchemaViolation(
            reason,
            expected=expected,
            found=found,
            source_path=self.source_path,
            line=self.line or None,
        )

    def premature_end(self, reason: Optional[str] = None) -> PrematureEnd:
        return PrematureEnd(
            self.state.value, reason, source_path=self.source_path, line=self.line or None
        )


# ---------------------------------------------------------------------------
# State functions
# ---------------------------------------------------------------------------


def read_root(ctx: ParserContext) -> None:
    logger.debug("parser: readRoot")
    ctx.state = ParserState.ROOT
    token = ctx.next_token()
    while token is not None and token.kind is not TokenKind.START:
        token = ctx.next_token()
    if token is None:
        raise ctx.premature_end(f"Premature end of file. No '{ANALYSIS_OUTPUT}' element found")

    logger.debug("<%s>", token.name)
    if token.name != ANALYSIS_OUTPUT:
        raise ctx.violation(
            f"Unexpected element in root: '{token.name}'",
            expected=ANALYSIS_OUTPUT,
            found=token.name,
        )
    read_analysis_output(ctx)

    # exactly one top-level element
    token = ctx.next_token()
    while token is not None:
        if token.kind is TokenKind.START:
            raise ctx.violation(
                f"Unexpected element after '{ANALYSIS_OUTPUT}': '{token.name}'",
                found=token.name,
            )
        token = ctx.next_token()


def read_analysis_output(ctx: ParserContext) -> None:
    logger.debug("parser: readAnalysisOutput")
    ctx.state = ParserState.AT_ANALYSIS_OUTPUT
    while True:
        token = ctx.next_token()
        if token is None:
            raise ctx.premature_end("Premature end of file or no closing tag for root found")

        if token.kind is TokenKind.START:
            logger.debug("<%s>", token.name)
            if token.name != ISSUES:
                raise ctx.violation(
                    f"Unexpected element in '{ANALYSIS_OUTPUT}' node: '{token.name}'",
                    expected=ISSUES,
                    found=token.name,
                )
            read_issues(ctx)
            ctx.state = ParserState.AT_ANALYSIS_OUTPUT
            continue

        logger.debug("</%s>", token.name)
        if token.name != ANALYSIS_OUTPUT:
            raise ctx.violation(
                f"Expecting '{ANALYSIS_OUTPUT}' end element. Got: '{token.name}'",
                expected=ANALYSIS_OUTPUT,
                found=token.name,
            )
        ctx.state = ParserState.DONE
        return


def read_issues(ctx: ParserContext) -> None:
    logger.debug("parser: readIssues")
    ctx.state = ParserState.ISSUES
    while True:
        token = ctx.next_token()
        if token is None:
            raise ctx.premature_end(f"Premature end of file. No closing tag for '{ISSUES}' found")

        if token.kind is TokenKind.START:
            logger.debug("<%s>", token.name)
            if token.name != ISSUE:
                raise ctx.violation(
                    f"Unexpected element in '{ISSUES}' node: '{token.name}'",
                    expected=ISSUE,
                    found=token.name,
                )
            ctx.issues.append(read_issue(ctx))
            ctx.state = ParserState.ISSUES
            continue

        logger.debug("</%s>", token.name)
        if token.name == ISSUE:
            # one issue read, loop again
            continue
        if token.name == ISSUES:
            return
        raise ctx.violation(
            f"Expecting '{ISSUES}' end element. Got: '{token.name}'",
            expected=ISSUES,
            found=token.name,
        )


def read_issue(ctx: ParserContext) -> Issue:
    logger.debug("parser: readIssue")
    ctx.state = ParserState.ISSUE
    rule_key = read_element(ctx, RULE_KEY)
    if not rule_key.strip():
        raise ctx.violation(f"Element '{RULE_KEY}' must not be empty", expected=RULE_KEY, found=RULE_KEY)
    message = read_element(ctx, MESSAGE)
    absolute_file_path = read_element(ctx, ABSOLUTE_FILE_PATH)

    positions: List[Optional[int]] = []
    for index, name in enumerate(POSITION_ELEMENTS):
        if _position_missing(ctx, POSITION_ELEMENTS[index:]):
            positions.append(None)
        else:
            positions.append(read_int_element(ctx, name))

    start_line, start_column, end_line, end_column = positions
    try:
        return Issue(
            rule_key=rule_key,
            message=message,
            absolute_file_path=absolute_file_path,
            start_line=start_line,
            start_column=start_column,
            end_line=end_line,
            end_column=end_column,
        )
    except PydanticValidationError as exc:
        raise ctx.violation(f"Invalid '{ISSUE}' element: {exc.errors()[0]['msg']}", found=ISSUE) from exc


def _position_missing(ctx: ParserContext, remaining: tuple) -> bool:
    """True when the leaf ``remaining[0]`` is absent from the current issue.

    A leaf is absent when the issue closes first or when a later position
    leaf shows up in its place.
    """
    token = ctx.peek_token()
    if token is None:
        return False
    if token.kind is TokenKind.END:
        return token.name == ISSUE
    return token.name in remaining[1:]


# ---------------------------------------------------------------------------
# Leaf readers
# ---------------------------------------------------------------------------


def read_element(ctx: ParserContext, expected_name: str) -> str:
    """Read the next leaf element, which must be ``expected_name``.

    Returns the element text, or an empty string when it has none.
    """
    logger.debug("parser: readElement. Expected: '%s'", expected_name)
    token = ctx.next_token()
    if token is None:
        raise ctx.premature_end(f"Premature end of file. Expected element: '{expected_name}'")
    if token.kind is TokenKind.END:
        raise ctx.violation(
            f"Expected element: '{expected_name}'. Found end of '{token.name}'",
            expected=expected_name,
            found=f"/{token.name}",
        )
    if token.name != expected_name:
        raise ctx.violation(
            f"Expected element: '{expected_name}'. Found '{token.name}'",
            expected=expected_name,
            found=token.name,
        )

    logger.debug("<%s>", token.name)
    parts: List[str] = []
    while True:
        token = ctx.next_token(skip_text=False)
        if token is None:
            raise ctx.premature_end(f"Premature end of file. No closing tag for '{expected_name}' found")
        if token.kind is TokenKind.TEXT:
            parts.append(token.text)
        elif token.kind is TokenKind.START:
            raise ctx.violation(
                f"Unexpected element in '{expected_name}' node: '{token.name}'",
                found=token.name,
            )
        elif token.name == expected_name:
            break
        else:
            raise ctx.violation(
                f"Expecting '{expected_name}' end element. Got: '{token.name}'",
                expected=expected_name,
                found=token.name,
            )

    text = "".join(parts)
    logger.debug("Element text = '%s'", text)
    return text


def read_int_element(ctx: ParserContext, expected_name: str) -> Optional[int]:
    """Read a signed 32-bit integer leaf; empty or whitespace-only text yields None."""
    value = read_element(ctx, expected_name).strip()
    if not value:
        return None
    if not _INT_RE.fullmatch(value) or not INT_MIN <= int(value) <= INT_MAX:
        raise InvalidInteger(expected_name, value, source_path=ctx.source_path, line=ctx.line or None)
    return int(value)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def parse_tokens(tokens: Iterable[Token], source_path: str = "<tokens>") -> List[Issue]:
    """Run the state machine over ``tokens`` and return the issues in order.

    Raises
    ------
    AnalysisParseError
        SchemaViolation, PrematureEnd or InvalidInteger, plus any
        StreamFailure raised by the token source.
    """
    reader = tokens if isinstance(tokens, DocumentReader) else None
    ctx = ParserContext(source_path=source_path, tokens=iter(tokens), reader=reader)
    read_root(ctx)
    return ctx.issues


def _open_source(path: str) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise StreamFailure(
            f"Cannot open analysis file: {exc.strerror or exc}", source_path=path
        ) from exc


def _close_quietly(stream: BinaryIO, source_path: str) -> None:
    try:
        stream.close()
    except Exception as exc:
        logger.warning("Failed to close analysis file %s: %s", source_path, exc)


def parse_analysis_output(
    source: Union[str, Path, BinaryIO],
    *,
    source_path: Optional[str] = None,
    chunk_size: Optional[int] = None,
) -> ParseResult:
    """
    Parse an ``AnalysisOutput`` document.

    The stream (opened here for paths, taken over for file objects) and the
    reader are closed before returning, whatever the outcome.

    Args:
        source: Path to the document, or a readable binary file object
        source_path: Name used in diagnostics for file objects
        chunk_size: Bytes read per chunk

    Returns:
        ParseSuccess with every issue in document order, or ParseFailure
        with the single error that stopped the parse
    """
    from_path = isinstance(source, (str, Path))
    if from_path:
        path = str(Path(source).absolute())
    else:
        path = source_path or str(getattr(source, "name", "<stream>"))

    logger.info("Reading analysis file: %s", path)
    try:
        stream = _open_source(path) if from_path else source
        try:
            with DocumentReader(stream, path, chunk_size=chunk_size) as reader:
                issues = parse_tokens(reader, path)
        finally:
            _close_quietly(stream, path)
    except AnalysisParseError as exc:
        return ParseFailure(exc)

    logger.info("Reading analysis file done. Issues size: %d", len(issues))
    return ParseSuccess(issues)


def load_analysis_output(
    source: Union[str, Path, BinaryIO],
    *,
    source_path: Optional[str] = None,
    chunk_size: Optional[int] = None,
) -> List[Issue]:
    """Parse a document and return its issues, raising AnalysisParseError on failure."""
    return parse_analysis_output(source, source_path=source_path, chunk_size=chunk_size).unwrap()


__all__ = [
    "ParserState",
    "ParserContext",
    "read_root",
    "read_analysis_output",
    "read_issues",
    "read_issue",
    "read_element",
    "read_int_element",
    "parse_tokens",
    "parse_analysis_output",
    "load_analysis_output",
]
