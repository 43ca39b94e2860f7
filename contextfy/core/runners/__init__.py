from .build import BuildReport, BuildRunner, DocumentOutcome

__all__ = ["BuildRunner", "BuildReport", "DocumentOutcome"]
