"""Closed enumerations used across the note model.

Each ``parse`` falls back to a default for unknown raw strings so records
written by newer or older versions still load.
"""

from enum import StrEnum


class BlockType(StrEnum):
    TEXT = "text"
    TABLE = "table"
    ACCORDION = "accordion"
    CODE = "code"
    IMAGE = "image"
    COLUMNS = "columns"
    LIST = "list"
    QUOTE = "quote"
    BOOKMARK = "bookmark"
    FILE_PATH = "filePath"
    REMINDER = "reminder"

    @classmethod
    def parse(cls, raw: str | None) -> "BlockType":
        try:
            return cls(raw or cls.TEXT)
        except ValueError:
            return cls.TEXT


class ListType(StrEnum):
    BULLET = "bullet"
    NUMBERED = "numbered"
    CHECKBOX = "checkbox"

    @classmethod
    def parse(cls, raw: str | None) -> "ListType":
        try:
            return cls(raw or cls.BULLET)
        except ValueError:
            return cls.BULLET


class HeadingLevel(StrEnum):
    H1 = "h1"
    H2 = "h2"
    H3 = "h3"

    @classmethod
    def parse(cls, raw: str | None) -> "HeadingLevel":
        try:
            return cls(raw or cls.H1)
        except ValueError:
            return cls.H1


class CodeLanguage(StrEnum):
    SWIFT = "swift"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    HTML = "html"
    CSS = "css"
    JSON = "json"
    RUST = "rust"
    GO = "go"
    JAVA = "java"
    KOTLIN = "kotlin"
    C = "c"
    CPP = "cpp"
    OBJECTIVEC = "objectivec"
    RUBY = "ruby"
    PHP = "php"
    SQL = "sql"
    BASH = "bash"
    SHELL = "shell"
    ZSH = "zsh"
    YAML = "yaml"
    MARKDOWN = "markdown"
    PLAIN_TEXT = "text"

    @classmethod
    def parse(cls, raw: str | None) -> "CodeLanguage":
        try:
            return cls(raw or cls.PLAIN_TEXT)
        except ValueError:
            return cls.PLAIN_TEXT


class NoteStatus(StrEnum):
    SAVED = "saved"
    TEMP = "temp"
    DELETED = "deleted"

    @classmethod
    def parse(cls, raw: str | None) -> "NoteStatus":
        try:
            return cls(raw or cls.SAVED)
        except ValueError:
            return cls.SAVED
