"""Exceptions raised while generating the P-256 test corpus."""


class TestGenError(Exception):
    """A fatal condition; the corpus is only useful when complete."""

    __test__ = False  # keep pytest from collecting it


class UnexpectedInvariantViolation(TestGenError):
    """A record or generated case contradicts its declared expectation."""


class NetworkFailure(TestGenError):
    """A test vector document could not be fetched or parsed."""


class MalformedInputVector(Exception):
    """A single record fails a structural check.

    Never fatal by itself: the ingestion pipelines either drop the record
    or escalate to UnexpectedInvariantViolation.
    """
