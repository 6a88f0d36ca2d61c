"""Writer configuration for XML text output."""

from pydantic import BaseModel, ConfigDict, field_validator


class WriterSettings(BaseModel):
    """Formatting options used when writing XML text.

    The defaults describe a plain writer: no indentation and an XML
    declaration at the top. ``DEFAULT_WRITER_SETTINGS`` is what
    ``to_xml`` uses when no settings are passed.

    Attributes:
        indent: Put child elements on their own, indented lines
        indent_chars: Whitespace used for one level of indentation
        new_line_chars: Line separator used when indenting
        new_line_on_attributes: Put each attribute on its own line (only
            when ``indent`` is set)
        omit_xml_declaration: Skip the ``<?xml ...?>`` declaration
        encoding: Encoding named in the XML declaration
    """
    model_config = ConfigDict(frozen=True)

    indent: bool = False
    indent_chars: str = "  "
    new_line_chars: str = "\n"
    new_line_on_attributes: bool = False
    omit_xml_declaration: bool = False
    encoding: str = "utf-8"

    @field_validator("indent_chars", "new_line_chars")
    @classmethod
    def check_whitespace_only(cls, value: str) -> str:
        if value.strip():
            raise ValueError("must contain only whitespace characters")
        return value

    @field_validator("new_line_chars", "encoding")
    @classmethod
    def check_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value


DEFAULT_WRITER_SETTINGS = WriterSettings(
    indent=True,
    new_line_on_attributes=True,
    omit_xml_declaration=True,
)
