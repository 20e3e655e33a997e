"""Error type used across the package."""

from __future__ import annotations


class ProxyError(Exception):
    """An error whose message can be extended with the cause it wraps."""

    def __init__(self, info: str) -> None:
        super().__init__(info)
        self.info = info

    def __str__(self) -> str:
        return self.info

    def base(self, err: BaseException | None) -> "ProxyError":
        """Append the message of ``err`` (if any) and return ``self``."""
        if err is not None:
            self.info += " | " + str(err)
            self.args = (self.info,)
        return self


def must(err: BaseException | None) -> None:
    """Print and raise ``err`` if it is set."""
    if err is not None:
        print(err)
        raise err