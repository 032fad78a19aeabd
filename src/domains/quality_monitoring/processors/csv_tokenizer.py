from utils.logging.logging_manager import LogManager

from ..core.errors import ParseError

QUOTE = '"'
BOM = "\ufeff"


class CsvTokenizer:
    """Splits spreadsheet exports into rows of trimmed string fields.

    The delimiter is sniffed from the first line (comma, semicolon or tab) because
    exports come from Google Sheets, Excel pt-BR and hand-edited files alike.
    Malformed quoting never raises: an unterminated quote is re-read as a literal
    character. The only fatal condition is content that cannot be decoded as text.
    """

    CANDIDATE_DELIMITERS = (",", ";", "\t")
    DEFAULT_DELIMITER = ","
    SNIFF_LIMIT = 500

    def __init__(self, encodings: list[str] | None = None):
        self.encodings = encodings or ["utf-8-sig", "cp1252"]
        self.logger = LogManager.get_instance().get_logger("CsvTokenizer")

    def decode(self, raw: bytes) -> str:
        """Decodes raw file bytes trying each configured encoding in order.

        Raises:
            ParseError: If no encoding can decode the content.
        """
        for encoding in self.encodings:
            try:
                text = raw.decode(encoding)
                self.logger.debug(f"Decoded {len(raw)} bytes as {encoding}")
                return text
            except (UnicodeDecodeError, LookupError):
                continue
        raise ParseError("Input is not decodable as text", encodings=self.encodings, size=len(raw))

    def detect_delimiter(self, text: str) -> str:
        """Picks the delimiter with the strictly highest raw count in the first line
        (capped at SNIFF_LIMIT characters). Ties and empty samples fall back to comma.
        """
        line_end = text.find("\n")
        sample_end = self.SNIFF_LIMIT if line_end == -1 else min(line_end, self.SNIFF_LIMIT)
        sample = text[:sample_end]

        counts = {delimiter: sample.count(delimiter) for delimiter in self.CANDIDATE_DELIMITERS}
        best = max(counts.values())
        winners = [delimiter for delimiter, count in counts.items() if count == best]
        if best == 0 or len(winners) > 1:
            return self.DEFAULT_DELIMITER
        return winners[0]

    def tokenize(self, content: str | bytes) -> list[list[str]]:
        """Tokenizes raw file content into rows of trimmed fields.

        Args:
            content (Union[str, bytes]): File content; bytes are decoded first.

        Returns:
            list[list[str]]: Rows in file order, blank lines removed.

        Raises:
            ParseError: If bytes content cannot be decoded.
        """
        text = self.decode(content) if isinstance(content, bytes) else content
        if text.startswith(BOM):
            text = text[len(BOM):]

        delimiter = self.detect_delimiter(text)
        self.logger.debug(f"Detected delimiter {delimiter!r}")
        return self._scan(text, delimiter)

    def _scan(self, text: str, delimiter: str) -> list[list[str]]:
        rows: list[list[str]] = []
        row: list[str] = []
        field: list[str] = []
        in_quotes = False
        literal_quotes: set[int] = set()
        snapshot = None
        length = len(text)
        i = 0

        while True:
            while i < length:
                char = text[i]

                if in_quotes:
                    if char == QUOTE:
                        if i + 1 < length and text[i + 1] == QUOTE:
                            field.append(QUOTE)
                            i += 1
                        else:
                            in_quotes = False
                    else:
                        field.append(char)
                elif char == QUOTE and i not in literal_quotes:
                    in_quotes = True
                    snapshot = (i, len(rows), list(row), list(field))
                elif char == delimiter:
                    row.append("".join(field).strip())
                    field = []
                elif char in "\r\n":
                    if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                        i += 1
                    row.append("".join(field).strip())
                    self._append_row(rows, row)
                    row, field = [], []
                else:
                    field.append(char)
                i += 1

            if not in_quotes:
                break

            # Unterminated quote: rewind and read that quote as a literal character.
            quote_index, row_count, row, field = snapshot
            self.logger.warning(f"Unterminated quote at character {quote_index}; reading it literally")
            del rows[row_count:]
            literal_quotes.add(quote_index)
            in_quotes = False
            i = quote_index

        if field or row:
            row.append("".join(field).strip())
            self._append_row(rows, row)
        return rows

    @staticmethod
    def _append_row(rows: list[list[str]], row: list[str]) -> None:
        if len(row) == 1 and row[0] == "":
            return
        rows.append(row)
