"""
Account lookup failures.

Both are translated to HTTP errors in `router.py`; nothing here retries.
"""

from __future__ import annotations


class AccountNotFoundError(LookupError):
    def __init__(self, account_id: str) -> None:
        super().__init__(f"Account {account_id} not found.")
        self.account_id = account_id


class QueryFailure(RuntimeError):
    """
    A store query failed. `stage` names the logical lookup, e.g. "signers"
    or "batch-trustlines"; the store error is kept as `__cause__`.
    """

    def __init__(self, stage: str) -> None:
        super().__init__(f"query failed: {stage}")
        self.stage = stage
