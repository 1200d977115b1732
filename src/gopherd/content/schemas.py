"""Pydantic schemas for directory listings."""

from pydantic import BaseModel, Field

from gopherd.content.types import ItemType


class DirectoryEntry(BaseModel):
    """Directory listing entry."""

    name: str
    path: str = Field(description="Selector relative to the server root")
    is_directory: bool
    item_type: ItemType

    def to_menu_line(self, host: str, port: int) -> str:
        """Format this entry as a CRLF-terminated Gopher menu line."""
        return f"{self.item_type.value}{self.name}\t{self.path}\t{host}\t{port}\r\n"
