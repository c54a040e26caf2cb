"""
Test lifecycle shell: Draft → Calculated → Saved.

The evaluators are stateless. A TestRecord holds the current inputs, the
result computed from them and a digest of those inputs. Every transition
returns a new record; editing inputs drops the result, so a stale verdict
is never carried forward.
"""

import hashlib
from enum import Enum
from typing import Callable, Optional, Union

from pydantic import BaseModel, ConfigDict

from aircheck.engine.code_limits import DEFAULT_CODE_LIMITS, CodeLimitTable
from aircheck.engine.duct_leakage import evaluate_duct_leakage
from aircheck.engine.envelope import evaluate_blower_door
from aircheck.engine.errors import InputValidationError
from aircheck.engine.ventilation import evaluate_ventilation
from aircheck.models.blower_door import BlowerDoorResult, BlowerDoorTest
from aircheck.models.duct_leakage import DuctLeakageResult, DuctLeakageTest
from aircheck.models.ventilation import VentilationResult, VentilationTest

TestInput = Union[BlowerDoorTest, VentilationTest, DuctLeakageTest]
TestResult = Union[BlowerDoorResult, VentilationResult, DuctLeakageResult]


class RecordStatus(str, Enum):
    DRAFT = "draft"
    CALCULATED = "calculated"
    SAVED = "saved"


class TestRecord(BaseModel):
    """A test's inputs plus the verdict computed from them."""
    model_config = ConfigDict(frozen=True)

    # Not a pytest test class despite the name
    __test__ = False

    status: RecordStatus = RecordStatus.DRAFT
    test: TestInput
    result: Optional[TestResult] = None
    input_digest: Optional[str] = None


def input_digest(test: TestInput) -> str:
    """SHA-256 of the canonical JSON form of a test's inputs."""
    payload = type(test).__name__ + ":" + test.model_dump_json()
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _evaluate(test: TestInput, limits: CodeLimitTable) -> TestResult:
    evaluators: dict[type, Callable] = {
        BlowerDoorTest: lambda t: evaluate_blower_door(t, limits),
        VentilationTest: evaluate_ventilation,
        DuctLeakageTest: lambda t: evaluate_duct_leakage(t, limits),
    }
    evaluator = evaluators.get(type(test))
    if evaluator is None:
        raise InputValidationError(f"Unsupported test type: {type(test).__name__}")
    return evaluator(test)


def new_record(test: TestInput) -> TestRecord:
    return TestRecord(status=RecordStatus.DRAFT, test=test)


def calculate(record: TestRecord, limits: CodeLimitTable = DEFAULT_CODE_LIMITS) -> TestRecord:
    """Compute a fresh result from the record's current inputs."""
    result = _evaluate(record.test, limits)
    return TestRecord(
        status=RecordStatus.CALCULATED,
        test=record.test,
        result=result,
        input_digest=input_digest(record.test),
    )


def edit(record: TestRecord, **changes) -> TestRecord:
    """
    Return a draft record with updated inputs. The previous result is
    discarded; call calculate() again before trusting a verdict.
    """
    data = record.test.model_dump()
    data.update(changes)
    updated = type(record.test).model_validate(data)
    return TestRecord(status=RecordStatus.DRAFT, test=updated)


def is_stale(record: TestRecord) -> bool:
    """True when there is no result or it was computed from other inputs."""
    return record.result is None or record.input_digest != input_digest(record.test)


def mark_saved(record: TestRecord) -> TestRecord:
    """Mark a calculated record as persisted by the caller."""
    if record.status == RecordStatus.DRAFT or is_stale(record):
        raise InputValidationError("Test must be calculated from its current inputs before saving")
    return TestRecord(
        status=RecordStatus.SAVED,
        test=record.test,
        result=record.result,
        input_digest=record.input_digest,
    )


def verify(record: TestRecord, limits: CodeLimitTable = DEFAULT_CODE_LIMITS) -> bool:
    """Recompute from the stored inputs and compare with the stored result."""
    if record.result is None:
        return False
    return _evaluate(record.test, limits) == record.result
