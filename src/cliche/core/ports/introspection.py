from typing import Protocol

from cliche.models import PackageDecl


class DeclarationParser(Protocol):
    """Turns source text into the declarations of a single package file.

    Implementations raise SourceUnparsableError when the source is not valid.
    """

    def parse(self, source: bytes, filename: str = "<source>") -> PackageDecl: ...
