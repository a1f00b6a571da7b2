"""
Domain errors raised by the agent and ledger services.

The API layer maps each kind to an HTTP status (see src.main).
"""


class LedgerError(Exception):
    """Base class for domain errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Invalid input: bad commission split, negative amount, missing field."""

    status_code = 422


class ConflictError(LedgerError):
    """Unique constraint violated, e.g. duplicate agent email."""

    status_code = 409


class NotFoundError(LedgerError):
    """Referenced agent or sale does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConsistencyError(LedgerError):
    """A sale write and its agent total update could not both be applied."""

    status_code = 500
