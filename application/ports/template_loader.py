from __future__ import annotations

from typing import Protocol


class TemplateLoader(Protocol):
    """Port for loading pipeline templates by logical name.

    Concrete adapters live in infrastructure/template_loaders/ and read from a
    directory or object store (fsspec) or from files embedded in a package.
    """

    def load(self, name: str) -> bytes | None:
        """Return the raw template bytes, or None when no template has that name.

        Raises:
            OSError: If the template exists but cannot be read

        """
        ...
