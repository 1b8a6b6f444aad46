"""
Validation failures of the pagerank entry point.

Every invariant checked before iterating has its own exception class. The
class attribute ``invariant`` carries the tag naming the failed check, so 
callers may either catch the specific class or inspect the tag on the base
:class:`ValidationError`.
"""


class ValidationError(ValueError):
    invariant = None


class SelfReferencingEdges(ValidationError):
    invariant = 'SelfReferencingEdges'


class NonNormalizedEdges(ValidationError):
    invariant = 'NonNormalizedEdges'


class UnnormalizedPriorVector(ValidationError):
    invariant = 'UnnormalizedPriorVector'


class TeleportProbabilityOutOfRange(ValidationError):
    invariant = 'TeleportProbabilityOutOfRange'


class MaxIterationsNotPositive(ValidationError):
    invariant = 'MaxIterationsNotPositive'


class ConvergenceThresholdOutOfRange(ValidationError):
    invariant = 'ConvergenceThresholdOutOfRange'


class TooFewVertices(ValidationError):
    invariant = 'TooFewVertices'


INVARIANTS = {
    cls.invariant: cls for cls in [
        SelfReferencingEdges,
        NonNormalizedEdges,
        UnnormalizedPriorVector,
        TeleportProbabilityOutOfRange,
        MaxIterationsNotPositive,
        ConvergenceThresholdOutOfRange,
        TooFewVertices
    ]
}
