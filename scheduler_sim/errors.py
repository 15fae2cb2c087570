from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class InvalidInputError(SchedulerError, ValueError):
    """
    The workload cannot be simulated: negative arrival, non-positive burst,
    duplicate pid, missing priority for a priority engine, or a malformed
    workload file.
    """


class DegenerateQuantumError(SchedulerError, ValueError):
    """A quantum-driven engine was constructed with a quantum <= 0."""


class SchedulingInvariantError(SchedulerError, RuntimeError):
    """
    Internal bookkeeping went wrong. This always indicates a bug in an
    engine, never bad input.
    """
