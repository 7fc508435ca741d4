from cliche.introspect.go_adapter import GoDeclarationParser

__all__ = ["GoDeclarationParser"]
