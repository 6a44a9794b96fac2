"""Response models handed from command handlers to the transport.

```
TextResponse(content="I assigned you some roles.")
RichResponse(title="Kink: Bondage", description="...", fields=[EmbedField(...)])
```

Either variant may set ``private=True`` to be delivered to the invoking
actor's DMs instead of the channel.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

ACCENT_COLOR = 0x1B446F


@dataclass(slots=True)
class TextResponse:
    content: str
    private: bool = False

    def is_displayable(self) -> bool:
        return bool(self.content and self.content.strip())


@dataclass(slots=True)
class EmbedField:
    name: str
    value: str
    inline: bool = True


@dataclass(slots=True)
class RichResponse:
    title: Optional[str] = None
    description: Optional[str] = None
    fields: List[EmbedField] = field(default_factory=list)
    url: Optional[str] = None
    image: Optional[str] = None
    color: Optional[int] = None
    private: bool = False

    def is_displayable(self) -> bool:
        """Return ``True`` when at least one visible field is set."""
        return any((self.title, self.description, self.fields, self.url, self.image))

    def stamped(self, title: str | None, color: int = ACCENT_COLOR) -> "RichResponse":
        """Return a copy carrying the command title prefix and accent color."""
        if title and self.title:
            full_title = f"{title} - {self.title}"
        else:
            full_title = title or self.title
        return replace(self, title=full_title, color=color)


Response = Union[TextResponse, RichResponse]

__all__ = ["ACCENT_COLOR", "TextResponse", "EmbedField", "RichResponse", "Response"]
