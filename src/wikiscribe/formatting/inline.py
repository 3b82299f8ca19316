"""Inline Markdown tokenizer producing annotated text runs.

The tokenizer makes a single left-to-right pass. At each cursor position it
looks for the earliest-starting match among the rows of ``MARKER_TABLE``;
when two rows match at the same position the row listed first wins. A
matched span is consumed whole, so text inside a link label is never
re-read as bold, italic or code.
"""

from dataclasses import dataclass
from typing import Optional

from wikiscribe.formatting.chunker import chunk_text
from wikiscribe.formatting.ir import MAX_RUN_LENGTH, TextRun


@dataclass(frozen=True)
class Marker:
    """One row of the inline marker table.

    Attributes:
        name: Annotation produced ("link", "code", "bold" or "italic")
        opener: Delimiter that starts the span
        closer: Delimiter that ends the span
        stop: Character that may not appear inside the span body
    """

    name: str
    opener: str
    closer: str
    stop: str


@dataclass(frozen=True)
class Match:
    """A marker span found in a line."""

    start: int
    end: int
    run: TextRun


# Order matters: ties at one position go to the earlier row
MARKER_TABLE: tuple[Marker, ...] = (
    Marker("link", "[", "]", "]"),
    Marker("code", "`", "`", "`"),
    Marker("bold", "**", "**", "*"),
    Marker("bold", "__", "__", "_"),
    Marker("italic", "*", "*", "*"),
    Marker("italic", "_", "_", "_"),
)


class InlineTokenizer:
    """Split one line of Markdown into annotated text runs."""

    def __init__(
        self,
        max_run_length: int = MAX_RUN_LENGTH,
        markers: tuple[Marker, ...] = MARKER_TABLE,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            max_run_length: Longest content allowed in a single run
            markers: Ordered marker table, most specific rows first
        """
        if max_run_length <= 0:
            raise ValueError("max_run_length must be positive")
        self.max_run_length = max_run_length
        self.markers = markers

    def tokenize(self, line: Optional[str]) -> list[TextRun]:
        """Convert a line into runs.

        Empty or None input yields a single empty plain run. Runs longer
        than ``max_run_length`` are split with :func:`chunk_text`, each
        piece keeping the original annotations.
        """
        if not line:
            return [TextRun(content="")]

        # Next match per marker row; None once a row can no longer match
        found = [self._find(marker, line, 0) for marker in self.markers]
        runs: list[TextRun] = []
        pos = 0
        while pos < len(line):
            match = self._earliest_match(line, pos, found)
            if match is None:
                runs.append(TextRun(content=line[pos:]))
                break

            if match.start > pos:
                runs.append(TextRun(content=line[pos : match.start]))
            runs.append(match.run)
            pos = match.end

        return self._enforce_length(runs)

    def _earliest_match(
        self, line: str, pos: int, found: list[Optional[Match]]
    ) -> Optional[Match]:
        """Find the earliest-starting span among all markers.

        A row is searched again only when the cursor has moved past the
        start of its previous match.
        """
        best: Optional[Match] = None
        for index, marker in enumerate(self.markers):
            match = found[index]
            if match is not None and match.start < pos:
                match = found[index] = self._find(marker, line, pos)
            if match is not None and (best is None or match.start < best.start):
                best = match
        return best

    def _find(self, marker: Marker, line: str, pos: int) -> Optional[Match]:
        """Find the first position at or after *pos* where *marker* matches."""
        if marker.name == "link":
            return self._find_link(line, pos)
        return self._find_span(marker, line, pos)

    def _find_span(self, marker: Marker, line: str, pos: int) -> Optional[Match]:
        """Match ``opener body closer`` where body excludes the stop char."""
        stop_at = -1
        start = line.find(marker.opener, pos)
        while start != -1:
            body_start = start + len(marker.opener)
            if stop_at < body_start:
                stop_at = line.find(marker.stop, body_start)
                if stop_at == -1:
                    return None
            if stop_at > body_start and line.startswith(marker.closer, stop_at):
                run = TextRun(
                    content=line[body_start:stop_at],
                    bold=marker.name == "bold",
                    italic=marker.name == "italic",
                    code=marker.name == "code",
                )
                return Match(start=start, end=stop_at + len(marker.closer), run=run)
            start = line.find(marker.opener, start + 1)
        return None

    def _find_link(self, line: str, pos: int) -> Optional[Match]:
        """Match ``[label](url)``. The label is kept as literal text."""
        label_end = -1
        start = line.find("[", pos)
        while start != -1:
            if label_end <= start:
                label_end = line.find("]", start + 1)
                if label_end == -1:
                    return None
            if label_end > start + 1 and line.startswith("(", label_end + 1):
                url_start = label_end + 2
                url_end = line.find(")", url_start)
                if url_end == -1:
                    return None
                if url_end > url_start:
                    run = TextRun(
                        content=line[start + 1 : label_end],
                        link=line[url_start:url_end],
                    )
                    return Match(start=start, end=url_end + 1, run=run)
            start = line.find("[", start + 1)
        return None

    def _enforce_length(self, runs: list[TextRun]) -> list[TextRun]:
        """Re-split oversized runs, preserving annotations and order."""
        result: list[TextRun] = []
        for run in runs:
            if len(run.content) <= self.max_run_length:
                result.append(run)
                continue
            for piece in chunk_text(run.content, self.max_run_length):
                result.append(run.with_content(piece))
        return result


_default_tokenizer = InlineTokenizer()


def tokenize(line: Optional[str]) -> list[TextRun]:
    """Tokenize a line with the default run length limit."""
    return _default_tokenizer.tokenize(line)
