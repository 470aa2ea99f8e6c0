from boxtrack.application.use_cases.codes.code_registry import CodeRegistry

__all__ = ["CodeRegistry"]
