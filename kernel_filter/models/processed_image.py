from __future__ import annotations
from dataclasses import dataclass
import base64


@dataclass(frozen=True)
class ProcessedImage:
    """
    Result of a filter pass, handed over to the caller as-is.
    """
    width: int
    height: int
    data: bytes  # RGBA8, row-major, len == width * height * 4

    def to_dict(self, encoding: str = "list") -> dict:
        """
        JSON-friendly form. ``encoding`` is "list" (array of ints) or "base64".
        """
        if encoding == "base64":
            payload = base64.b64encode(self.data).decode("ascii")
        elif encoding == "list":
            payload = list(self.data)
        else:
            raise ValueError(f"Unknown data encoding: {encoding}")
        return {"width": self.width, "height": self.height, "data": payload}
