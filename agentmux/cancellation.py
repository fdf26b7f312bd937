class CancellationToken:
    """
    Cooperative cancellation flag.

    The engine polls it at the top of every loop iteration, before each tool
    dispatch and after each tool batch. Requests already sent are not aborted;
    only what would follow them is skipped.
    """

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"
