import base64
import binascii
import logging
import os
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SNIPPETS_FILE = "snippets.txt"
DELIMITER = "|||"

# Optional sign then ASCII digits, anything else loads as id 0
ID_PATTERN = re.compile(r"[+-]?[0-9]+")

# Field values that cannot contain the delimiter
FIELD_PATTERN = r"(?!.*\|\|\|).*"


@dataclass
class Snippet:
    id: int
    name: str
    language: str
    code: str


def encode_snippet(snippet):
    """Turn a snippet into a single store line (without the newline)"""
    # Code is base64'd so newlines and delimiters inside it survive
    encoded_code = base64.b64encode(snippet.code.encode("utf-8")).decode("ascii")
    return DELIMITER.join(
        [str(snippet.id), snippet.name, snippet.language, encoded_code]
    )


def decode_snippet(line):
    """Parse one store line, or return None if it isn't a record"""
    parts = line.rstrip("\r\n").split(DELIMITER)
    if len(parts) != 4:
        return None

    snippet_id = int(parts[0]) if ID_PATTERN.fullmatch(parts[0]) else 0

    try:
        code = base64.b64decode(parts[3], validate=True).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        code = ""

    return Snippet(id=snippet_id, name=parts[1], language=parts[2], code=code)


class SnippetManager:
    def __init__(self, file_path=SNIPPETS_FILE):
        self.file_path = file_path
        self.snippets = []
        self.last_error = None
        self.load_snippets()

    def load_snippets(self):
        """Load snippets from file"""
        self.snippets = []
        if not os.path.exists(self.file_path):
            logger.debug("No snippet store at %s, starting empty", self.file_path)
            return

        try:
            # Undecodable bytes only spoil their own record, never the whole file
            with open(self.file_path, "r", encoding="utf-8", errors="replace") as f:
                for line_number, line in enumerate(f, start=1):
                    snippet = decode_snippet(line)
                    if snippet is None:
                        if line.strip():
                            logger.warning("Skipping malformed line %d in %s",
                                           line_number, self.file_path)
                        continue
                    self.snippets.append(snippet)
        except OSError as e:
            logger.warning("Error loading snippets from %s: %s", self.file_path, e)
            self.snippets = []
            return

        logger.info("Loaded %d snippets from %s", len(self.snippets), self.file_path)

    def save_snippets(self):
        """Rewrite the whole store. Returns False if it could not be written."""
        try:
            with open(self.file_path, "w", encoding="utf-8") as f:
                for snippet in self.snippets:
                    f.write(encode_snippet(snippet) + "\n")
        except OSError as e:
            logger.error("Error saving snippets to %s: %s", self.file_path, e)
            self.last_error = e
            return False

        self.last_error = None
        logger.debug("Saved %d snippets to %s", len(self.snippets), self.file_path)
        return True

    def max_id(self):
        return max((snippet.id for snippet in self.snippets), default=0)

    def generate_id(self):
        return self.max_id() + 1

    def add_snippet(self, name, language, code):
        snippet = Snippet(
            id=self.generate_id(), name=name, language=language, code=code
        )
        self.snippets.append(snippet)
        logger.info("Added snippet %d (%s)", snippet.id, snippet.name)
        return self.save_snippets()

    def delete_snippet(self, index):
        if not 0 <= index < len(self.snippets):
            raise IndexError(f"No snippet at index {index}")
        snippet = self.snippets.pop(index)
        logger.info("Deleted snippet %d (%s)", snippet.id, snippet.name)
        return self.save_snippets()

    def get_snippets(self):
        return self.snippets
