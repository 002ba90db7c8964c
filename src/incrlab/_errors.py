"""Exception hierarchy for incrlab."""


class LabError(Exception):
    """Base class for all incrlab errors."""


class ConfigurationError(LabError, ValueError):
    """Malformed generation, sample or lab parameters.

    Raised when the parameters are constructed, so a run never starts with them.
    """


class UnimplementedScenario(LabError):  # noqa: N818 - the name reads as a condition, not a failure
    """A scenario's distribution or computation is a declared stub.

    Fatal for the scenario that raised it; other scenarios in a batch still run.
    """

    def __init__(self, what: str) -> None:
        super().__init__(f"Scenario is not implemented: {what}")
        self.what = what


class BackendDesyncError(LabError):
    """The active backend is not the one the harness just installed.

    Raised by the harness itself; it aborts the run.
    """


class ReplayDivergenceError(LabError):
    """The two backends consumed different amounts of randomness in one step."""


class DanglingLocationError(LabError, KeyError):
    """A trace references a location missing from the graph snapshot."""

    def __init__(self, loc: object) -> None:
        super().__init__(f"Location {loc} is not present in the graph snapshot")
        self.loc = loc

    def __str__(self) -> str:
        return str(self.args[0])
