import enum
from typing import Optional


class ErrorKind(enum.Enum):
    INVALID_NAME = "invalid_name"
    DUPLICATE_ROUTER = "duplicate_router"
    ROUTER_NOT_FOUND = "router_not_found"
    LINK_NOT_FOUND = "link_not_found"
    INVALID_COST = "invalid_cost"
    INVALID_PARAMETERS = "invalid_parameters"
    MALFORMED_INPUT = "malformed_input"


class TopologyError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidName(TopologyError):
    kind = ErrorKind.INVALID_NAME


class DuplicateRouter(TopologyError):
    kind = ErrorKind.DUPLICATE_ROUTER

    def __init__(self, name: str):
        super().__init__(f"router already exists: {name}")
        self.name = name


class RouterNotFound(TopologyError):
    kind = ErrorKind.ROUTER_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"router not found: {name}")
        self.name = name


class LinkNotFound(TopologyError):
    kind = ErrorKind.LINK_NOT_FOUND

    def __init__(self, a: str, b: str):
        super().__init__(f"no link between {a} and {b}")
        self.a = a
        self.b = b


class InvalidCost(TopologyError):
    kind = ErrorKind.INVALID_COST

    def __init__(self, cost):
        super().__init__(f"link cost must be a non-negative integer, got {cost!r}")
        self.cost = cost


class InvalidParameters(TopologyError):
    kind = ErrorKind.INVALID_PARAMETERS


class MalformedInput(TopologyError):
    kind = ErrorKind.MALFORMED_INPUT

    def __init__(self, message: str, line_number: Optional[int] = None, cause: Optional[TopologyError] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
        self.cause = cause
