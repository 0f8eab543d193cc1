"""
Function references: the pipe mini-DSL used in schemas.

A reference names one or more registered functions:

- ``"trim"``            one stage, no arguments
- ``"round:2"``         one stage with the string argument ``"2"``
- ``"trim|upper"``      two stages applied left to right
- ``["trim", {"name": "lookup", "args": [{"A": "a"}]}]``
                        explicit stage list (non-string arguments)
- a callable            an inline function used as-is

References are parsed once, when a schema is compiled, into tuples of
:class:`FunctionCall` (or inline callables).
"""

from dataclasses import dataclass
from typing import Any, Callable, Tuple, Union

from datamapper.exceptions import SchemaError


@dataclass(frozen=True)
class FunctionCall:
    """A call to a registered function by name with extra positional arguments."""

    name: str
    args: Tuple[Any, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return ":".join([self.name, *(str(arg) for arg in self.args)])


Stage = Union[FunctionCall, Callable[..., Any]]


def _parse_call_string(text: str, reference: Any) -> FunctionCall:
    name, *args = text.split(":")
    name = name.strip()
    if not name:
        raise SchemaError(
            f"Empty function name in reference {reference!r}",
            error_code="SCHEMA_005",
            context={'reference': str(reference)}
        )
    return FunctionCall(name, tuple(args))


def parse_stage(stage: Any, reference: Any = None) -> Stage:
    """
    Parse one pipeline stage.

    Accepts a ``"name:arg"`` string, a ``{"name": ..., "args": [...]}`` mapping,
    a ``(name, *args)`` tuple or ``[name, *args]`` list, a :class:`FunctionCall`,
    or a callable.
    """
    reference = stage if reference is None else reference
    if isinstance(stage, FunctionCall) or callable(stage):
        return stage
    if isinstance(stage, str):
        return _parse_call_string(stage, reference)
    if isinstance(stage, dict):
        if 'name' not in stage:
            raise SchemaError(
                f"Function reference mapping needs a 'name': {stage!r}",
                error_code="SCHEMA_005",
                context={'reference': str(reference)}
            )
        args = stage.get('args') or ()
        if not isinstance(args, (list, tuple)):
            args = (args,)
        call = _parse_call_string(str(stage['name']), reference)
        return FunctionCall(call.name, call.args + tuple(args))
    # Lists appear where a tuple stage went through JSON or YAML
    if isinstance(stage, (tuple, list)) and stage and isinstance(stage[0], str):
        call = _parse_call_string(stage[0], reference)
        return FunctionCall(call.name, call.args + tuple(stage[1:]))
    raise SchemaError(
        f"Unsupported function reference {stage!r}",
        error_code="SCHEMA_005",
        context={'reference': str(reference)}
    )


def parse_reference(reference: Any) -> Tuple[Stage, ...]:
    """
    Parse a transform reference into its ordered stages.

    Example:
        >>> parse_reference("trim|round:2")
        (FunctionCall(name='trim', args=()), FunctionCall(name='round', args=('2',)))
    """
    if reference is None:
        return ()
    if isinstance(reference, str):
        return tuple(_parse_call_string(part, reference) for part in reference.split("|"))
    if isinstance(reference, list):
        stages = []
        for item in reference:
            if isinstance(item, str):
                stages.extend(parse_reference(item))
            else:
                stages.append(parse_stage(item, reference))
        return tuple(stages)
    return (parse_stage(reference),)


def parse_predicate(reference: Any) -> Stage:
    """
    Parse a condition or validation reference, which is a single call.

    Pipes have no meaning for predicates, so ``"|"`` is not split.
    """
    return parse_stage(reference)


def describe_stages(stages: Tuple[Stage, ...]) -> str:
    """Render stages back into pipe form (inline functions by their name)."""
    return "|".join(
        str(stage) if isinstance(stage, FunctionCall)
        else getattr(stage, '__name__', '<inline>')
        for stage in stages
    )
