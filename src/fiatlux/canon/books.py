"""Canonical book registry.

The 66 books of the Protestant canon, numbered 1..66 in canonical order.
Ordinal 0 is reserved and never names a book.

Parsing accepts a base name with an optional cardinal qualifier on either
side, in any case and with any whitespace: "1 Kings", "1kings", "Kings1",
"kings 1" all name 1 Kings.
"""

from __future__ import annotations

from enum import IntEnum

from fiatlux.errors import BookParseError


class Book(IntEnum):
    """A canonical book, valued by its 1-based ordinal."""

    GENESIS = 1
    EXODUS = 2
    LEVITICUS = 3
    NUMBERS = 4
    DEUTERONOMY = 5
    JOSHUA = 6
    JUDGES = 7
    RUTH = 8
    SAMUEL1 = 9
    SAMUEL2 = 10
    KINGS1 = 11
    KINGS2 = 12
    CHRONICLES1 = 13
    CHRONICLES2 = 14
    EZRA = 15
    NEHEMIAH = 16
    ESTHER = 17
    JOB = 18
    PSALMS = 19
    PROVERBS = 20
    ECCLESIASTES = 21
    SONG_OF_SONGS = 22
    ISAIAH = 23
    JEREMIAH = 24
    LAMENTATIONS = 25
    EZEKIEL = 26
    DANIEL = 27
    HOSEA = 28
    JOEL = 29
    AMOS = 30
    OBADIAH = 31
    JONAH = 32
    MICAH = 33
    NAHUM = 34
    HABAKKUK = 35
    ZEPHANIAH = 36
    HAGGAI = 37
    ZECHARIAH = 38
    MALACHI = 39
    MATTHEW = 40
    MARK = 41
    LUKE = 42
    JOHN = 43
    ACTS = 44
    ROMANS = 45
    CORINTHIANS1 = 46
    CORINTHIANS2 = 47
    GALATIANS = 48
    EPHESIANS = 49
    PHILIPPIANS = 50
    COLOSSIANS = 51
    THESSALONIANS1 = 52
    THESSALONIANS2 = 53
    TIMOTHY1 = 54
    TIMOTHY2 = 55
    TITUS = 56
    PHILEMON = 57
    HEBREWS = 58
    JAMES = 59
    PETER1 = 60
    PETER2 = 61
    JOHN1 = 62
    JOHN2 = 63
    JOHN3 = 64
    JUDE = 65
    REVELATION = 66

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "Book":
        """Get the book with the given canonical ordinal.

        Ordinals only come from trusted data (the corpus header, encoded
        paths), so an out-of-range value is a programming error.

        Raises:
            ValueError: If ordinal is not in 1..66
        """
        if not 1 <= ordinal <= len(cls):
            raise ValueError(f"invalid conversion: {ordinal} is not a book ordinal")
        return cls(ordinal)

    @property
    def display_name(self) -> str:
        """Canonical display name, e.g. "1 Kings" or "Song of Songs"."""
        return DISPLAY_NAMES[self]

    def __str__(self) -> str:
        return self.display_name

    def __format__(self, format_spec: str) -> str:
        # IntEnum formats as its integer value otherwise
        return format(self.display_name, format_spec)


DISPLAY_NAMES: dict[Book, str] = {
    Book.GENESIS: "Genesis",
    Book.EXODUS: "Exodus",
    Book.LEVITICUS: "Leviticus",
    Book.NUMBERS: "Numbers",
    Book.DEUTERONOMY: "Deuteronomy",
    Book.JOSHUA: "Joshua",
    Book.JUDGES: "Judges",
    Book.RUTH: "Ruth",
    Book.SAMUEL1: "1 Samuel",
    Book.SAMUEL2: "2 Samuel",
    Book.KINGS1: "1 Kings",
    Book.KINGS2: "2 Kings",
    Book.CHRONICLES1: "1 Chronicles",
    Book.CHRONICLES2: "2 Chronicles",
    Book.EZRA: "Ezra",
    Book.NEHEMIAH: "Nehemiah",
    Book.ESTHER: "Esther",
    Book.JOB: "Job",
    Book.PSALMS: "Psalms",
    Book.PROVERBS: "Proverbs",
    Book.ECCLESIASTES: "Ecclesiastes",
    Book.SONG_OF_SONGS: "Song of Songs",
    Book.ISAIAH: "Isaiah",
    Book.JEREMIAH: "Jeremiah",
    Book.LAMENTATIONS: "Lamentations",
    Book.EZEKIEL: "Ezekiel",
    Book.DANIEL: "Daniel",
    Book.HOSEA: "Hosea",
    Book.JOEL: "Joel",
    Book.AMOS: "Amos",
    Book.OBADIAH: "Obadiah",
    Book.JONAH: "Jonah",
    Book.MICAH: "Micah",
    Book.NAHUM: "Nahum",
    Book.HABAKKUK: "Habakkuk",
    Book.ZEPHANIAH: "Zephaniah",
    Book.HAGGAI: "Haggai",
    Book.ZECHARIAH: "Zechariah",
    Book.MALACHI: "Malachi",
    Book.MATTHEW: "Matthew",
    Book.MARK: "Mark",
    Book.LUKE: "Luke",
    Book.JOHN: "John",
    Book.ACTS: "Acts",
    Book.ROMANS: "Romans",
    Book.CORINTHIANS1: "1 Corinthians",
    Book.CORINTHIANS2: "2 Corinthians",
    Book.GALATIANS: "Galatians",
    Book.EPHESIANS: "Ephesians",
    Book.PHILIPPIANS: "Philippians",
    Book.COLOSSIANS: "Colossians",
    Book.THESSALONIANS1: "1 Thessalonians",
    Book.THESSALONIANS2: "2 Thessalonians",
    Book.TIMOTHY1: "1 Timothy",
    Book.TIMOTHY2: "2 Timothy",
    Book.TITUS: "Titus",
    Book.PHILEMON: "Philemon",
    Book.HEBREWS: "Hebrews",
    Book.JAMES: "James",
    Book.PETER1: "1 Peter",
    Book.PETER2: "2 Peter",
    Book.JOHN1: "1 John",
    Book.JOHN2: "2 John",
    Book.JOHN3: "3 John",
    Book.JUDE: "Jude",
    Book.REVELATION: "Revelation",
}

# Base names of books with no numbered variants (uppercase key -> book)
SINGLE_BOOKS: dict[str, Book] = {
    "GENESIS": Book.GENESIS,
    "EXODUS": Book.EXODUS,
    "LEVITICUS": Book.LEVITICUS,
    "NUMBERS": Book.NUMBERS,
    "DEUTERONOMY": Book.DEUTERONOMY,
    "JOSHUA": Book.JOSHUA,
    "JUDGES": Book.JUDGES,
    "RUTH": Book.RUTH,
    "EZRA": Book.EZRA,
    "NEHEMIAH": Book.NEHEMIAH,
    "ESTHER": Book.ESTHER,
    "JOB": Book.JOB,
    "PSALMS": Book.PSALMS,
    "PROVERBS": Book.PROVERBS,
    "ECCLESIASTES": Book.ECCLESIASTES,
    "SONGS": Book.SONG_OF_SONGS,
    "SONG OF SONGS": Book.SONG_OF_SONGS,
    "ISAIAH": Book.ISAIAH,
    "JEREMIAH": Book.JEREMIAH,
    "LAMENTATIONS": Book.LAMENTATIONS,
    "EZEKIEL": Book.EZEKIEL,
    "DANIEL": Book.DANIEL,
    "HOSEA": Book.HOSEA,
    "JOEL": Book.JOEL,
    "AMOS": Book.AMOS,
    "OBADIAH": Book.OBADIAH,
    "JONAH": Book.JONAH,
    "MICAH": Book.MICAH,
    "NAHUM": Book.NAHUM,
    "HABAKKUK": Book.HABAKKUK,
    "ZEPHANIAH": Book.ZEPHANIAH,
    "HAGGAI": Book.HAGGAI,
    "ZECHARIAH": Book.ZECHARIAH,
    "MALACHI": Book.MALACHI,
    "MATTHEW": Book.MATTHEW,
    "MARK": Book.MARK,
    "LUKE": Book.LUKE,
    "ACTS": Book.ACTS,
    "ROMANS": Book.ROMANS,
    "GALATIANS": Book.GALATIANS,
    "EPHESIANS": Book.EPHESIANS,
    "PHILIPPIANS": Book.PHILIPPIANS,
    "COLOSSIANS": Book.COLOSSIANS,
    "TITUS": Book.TITUS,
    "PHILEMON": Book.PHILEMON,
    "HEBREWS": Book.HEBREWS,
    "JAMES": Book.JAMES,
    "JUDE": Book.JUDE,
    "REVELATION": Book.REVELATION,
}

# Base names that need a cardinal qualifier (uppercase key -> qualifier -> book).
# John is special: unqualified it is the gospel, qualified it is an epistle.
NUMBERED_BOOKS: dict[str, dict[int | None, Book]] = {
    "SAMUEL": {1: Book.SAMUEL1, 2: Book.SAMUEL2},
    "KINGS": {1: Book.KINGS1, 2: Book.KINGS2},
    "CHRONICLES": {1: Book.CHRONICLES1, 2: Book.CHRONICLES2},
    "CORINTHIANS": {1: Book.CORINTHIANS1, 2: Book.CORINTHIANS2},
    "THESSALONIANS": {1: Book.THESSALONIANS1, 2: Book.THESSALONIANS2},
    "TIMOTHY": {1: Book.TIMOTHY1, 2: Book.TIMOTHY2},
    "PETER": {1: Book.PETER1, 2: Book.PETER2},
    "JOHN": {None: Book.JOHN, 1: Book.JOHN1, 2: Book.JOHN2, 3: Book.JOHN3},
}

# Placeholder names that look like books but must never resolve to one
RESERVED_NAMES = frozenset({"AUSTIN", "2 OPINIONS"})


def book_name(book: Book) -> str:
    """Get the canonical display name of a book."""
    return book.display_name


def first_numeric_nonnumeric_transition(text: str) -> int | None:
    """Find the first switch between alphabetic and non-alphabetic characters.

    Whitespace never counts as a transition. Returns the index of the first
    character on the far side of the switch, or None if the text is one
    homogeneous run.

    >>> first_numeric_nonnumeric_transition("1 Kings")
    2
    >>> first_numeric_nonnumeric_transition("Kings1")
    5
    """
    if not text:
        return None

    is_alphabetic = text[0].isalpha()
    for idx in range(1, len(text)):
        ch = text[idx]
        if not ch.isspace() and ch.isalpha() != is_alphabetic:
            return idx
    return None


def book_name_in_parts(text: str) -> tuple[str, int | None]:
    """Split a book designator into its base name and cardinal qualifier.

    Raises:
        BookParseError: If the qualifier is not a number in 1..255
    """
    idx = first_numeric_nonnumeric_transition(text)
    if idx is None:
        return text, None

    left = text[:idx].strip()
    right = text[idx:].strip()
    if any(ch in "0123456789" for ch in left):
        name, numeric = right, left
    else:
        name, numeric = left, right

    if not (numeric.isascii() and numeric.isdigit()):
        raise BookParseError(text)
    number = int(numeric)
    if not 0 < number <= 255:
        raise BookParseError(text)
    return name, number


def parse_book(text: str) -> Book:
    """Parse a book designator into a canonical Book.

    Args:
        text: Book name with optional cardinal, e.g. "Genesis", "1 kings",
            "John2", "song of songs"

    Returns:
        The canonical Book

    Raises:
        BookParseError: If the name is unknown, or the qualifier is missing,
            unexpected or out of range for the name
    """
    trimmed = text.strip()
    if " ".join(trimmed.upper().split()) in RESERVED_NAMES:
        raise BookParseError(text)

    name, number = book_name_in_parts(trimmed)
    key = " ".join(name.upper().split())

    if key in RESERVED_NAMES:
        raise BookParseError(text)

    if key in SINGLE_BOOKS:
        if number is not None:
            raise BookParseError(text)
        return SINGLE_BOOKS[key]

    variants = NUMBERED_BOOKS.get(key)
    if variants is not None and number in variants:
        return variants[number]

    raise BookParseError(text)
