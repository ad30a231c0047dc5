from typing import Optional


class MoustachioError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(MoustachioError):
    # errors related to configuration.
    pass

class DataLoadError(MoustachioError):
    # errors reading or decoding a data file for rendering.
    pass

class OutputError(MoustachioError):
    # errors during output operations.
    pass

class TemplateError(MoustachioError):
    # errors related to template compilation and rendering.
    pass

class TemplateDataError(TemplateError):
    # a value given to the data builder has no template representation.
    pass

class MalformedTagError(TemplateError):
    # unterminated tag or tag content that cannot be interpreted.
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)

class MismatchedSectionError(TemplateError):
    # close tag without a matching open tag, or a section left open.
    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(message)

class RecursionLimitExceededError(TemplateError):
    # partial expansion (or section nesting) went deeper than the limit allows.
    def __init__(self, limit: int, partial_name: Optional[str] = None):
        self.limit = limit
        self.partial_name = partial_name
        if partial_name is None:
            message = f"template nesting is too deep to render (interpreter recursion limit {limit})"
        else:
            message = f"partial nesting exceeded the limit of {limit} while expanding '{partial_name}'"
        super().__init__(message)
