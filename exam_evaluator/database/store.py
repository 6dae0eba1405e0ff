import json
import time
import logging
import threading
from typing import Any, Callable, List, Mapping, Optional, Protocol, Tuple, Union

from pydantic import ValidationError

from exam_evaluator.exceptions import CorruptStateError, InvalidResultError
from exam_evaluator.schemas import ExamResult

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "exam_evaluator_db"


class StorageBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


def current_time_millis() -> int:
    return int(time.time() * 1000)


def identity_key(result: ExamResult) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Composite identity of a stored result: usn (case-insensitive) plus the
    exact subject code and exam name. A missing usn counts as "".
    """
    return ((result.usn or "").lower(), result.subject_code, result.exam_name)


class ResultStore:
    """
    Persists the graded results as one JSON list under a single storage key.

    Saving is an upsert: any record with the same identity is dropped and the
    new one is appended, so list order is not chronological.
    """

    def __init__(self, storage: StorageBackend, key: str = DEFAULT_STORAGE_KEY,
                 clock: Callable[[], int] = current_time_millis):
        self.storage = storage
        self.key = key
        self.clock = clock
        # Serializes the read-modify-write of the blob across request threads.
        # Routes run in a threadpool; the read-modify-write of the blob must not interleave.
        self._lock = threading.Lock()

    def save(self, result: Union[ExamResult, Mapping[str, Any]]) -> ExamResult:
        """Upsert a result, stamping it with the current time. Returns the stored copy."""
        if not isinstance(result, ExamResult):
            try:
                result = ExamResult.model_validate(result)
            except ValidationError as e:
                raise InvalidResultError(str(e)) from e

        if not result.usn:
            logger.warning(
                f"Saving result without a usn for {result.subject_code}/{result.exam_name}; "
                "it will replace any other usn-less result of that exam"
            )

        target = identity_key(result)
        with self._lock:
            existing = self.get_all()
            others = [r for r in existing if identity_key(r) != target]

            stored = result.model_copy(update={"usn": result.usn or "", "timestamp": self.clock()})
            self._write(others + [stored])

        replaced = len(existing) - len(others)
        logger.info(
            f"Saved result for usn={stored.usn!r} exam={stored.exam_name!r} "
            f"({'replaced ' + str(replaced) if replaced else 'new record'})"
        )
        return stored

    def get_all(self) -> List[ExamResult]:
        """Return every stored result in storage order; [] when nothing is stored."""
        data = self.storage.get_item(self.key)
        if data is None:
            return []

        try:
            records = json.loads(data)
        except json.JSONDecodeError as e:
            logger.error(f"Stored results under {self.key!r} are not valid JSON: {str(e)}")
            raise CorruptStateError(f"Stored results are not valid JSON: {e}") from e

        if not isinstance(records, list):
            logger.error(f"Stored results under {self.key!r} are not a list")
            raise CorruptStateError("Stored results are not a list")

        results = []
        for index, record in enumerate(records):
            try:
                results.append(ExamResult.model_validate(record))
            except ValidationError as e:
                logger.error(f"Stored result #{index} failed validation: {str(e)}")
                raise CorruptStateError(f"Stored result #{index} is malformed: {e}") from e
        return results

    def clear_all(self) -> None:
        """Delete every stored result."""
        with self._lock:
            self.storage.remove_item(self.key)
        logger.info(f"Cleared all results under {self.key!r}")

    def _write(self, results: List[ExamResult]) -> None:
        payload = json.dumps([r.to_record() for r in results])
        self.storage.set_item(self.key, payload)
