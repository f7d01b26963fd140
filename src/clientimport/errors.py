# src/clientimport/errors.py
"""
Errors raised by the fetch stage.

The import session catches every FetchError and turns it into an operator
message; nothing here is meant to reach the top of the program.
"""


class FetchError(Exception):
    """Base class for anything that stops a roster fetch."""


class EmptyCredential(FetchError):
    def __init__(self) -> None:
        super().__init__("Please enter the API key.")


class FetchFailed(FetchError):
    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Could not fetch clients from e-Kontroll: {cause}")
