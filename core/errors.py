"""Errors raised while turning an LLM payload into a meal plan."""


class PlanError(Exception):
    """Base class – the collaborator's output could not be used."""


class MalformedPlan(PlanError):
    """Payload parsed, but its structure violates the plan contract."""


class EmptyResponse(PlanError):
    """Collaborator returned nothing usable (empty / not JSON / not an object)."""
