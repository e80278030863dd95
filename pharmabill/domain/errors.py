# pharmabill/domain/errors.py


class ValidationError(Exception):
    """Raised when a ledger operation is missing a required reference
    (counterparty, line items, product) or carries contradictory header data.

    The message is meant to be shown to the user as-is.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
