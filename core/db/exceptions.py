"""
Optimistic Locking Exceptions

Applications embed their interviews and feedback, so two requests touching
different interviews of the same application compete for the same row.
`VersionedModel.save_versioned()` detects the lost race and the service
layer retries on a fresh copy.
"""


class ConcurrentModificationError(Exception):
    """
    A versioned write found a different version in the database.

    Attributes:
        model_name: Name of the model class.
        object_id: Primary key of the record.
        expected_version: Version the writer read.
        actual_version: Version currently stored (None if the row is gone).
    """

    def __init__(self, model_name: str = None, object_id=None,
                 expected_version: int = None, actual_version: int = None):
        self.model_name = model_name
        self.object_id = object_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(self.describe())

    def describe(self) -> str:
        return (
            f"{self.model_name} {self.object_id} changed underneath this write "
            f"(read version {self.expected_version}, stored version {self.actual_version})"
        )


class StaleObjectError(ConcurrentModificationError):
    """
    Raised once every retry of a read-modify-write lost the race.

    `attempts` is how many times the change was re-applied.
    """

    def __init__(self, *args, attempts: int = None, **kwargs):
        self.attempts = attempts
        super().__init__(*args, **kwargs)

    def describe(self) -> str:
        return f"{super().describe()}; gave up after {self.attempts} attempts"

    @classmethod
    def from_conflict(cls, conflict: ConcurrentModificationError, attempts: int) -> 'StaleObjectError':
        return cls(
            model_name=conflict.model_name,
            object_id=conflict.object_id,
            expected_version=conflict.expected_version,
            actual_version=conflict.actual_version,
            attempts=attempts,
        )
