"""
Run options for ``transform_data``.

Options may be given as a :class:`TransformOptions`, a dict using either
camelCase (``skipErrors``) or snake_case (``skip_errors``) keys, or None for
the defaults. ``TransformOptions.from_env()`` reads them from the
environment for deployments that configure imports that way.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from datamapper.core.utils import get_env_bool, get_env_int

ENV_SKIP_ERRORS = "DATAMAPPER_SKIP_ERRORS"
ENV_MAX_ERRORS = "DATAMAPPER_MAX_ERRORS"
ENV_VALIDATE_ONLY = "DATAMAPPER_VALIDATE_ONLY"

DEFAULT_MAX_ERRORS = 100


class TransformOptions(BaseModel):
    """
    Partial-failure policy for one run.

    Attributes:
        skip_errors: Continue past row failures instead of aborting the run
        max_errors: Stop once this many errors have been collected. The cap is
            checked after each row and the row that reaches it keeps all its
            entries, so ``len(result.errors)`` can exceed it by up to one
            row's errors
        validate_only: Run the full pipeline but never keep accepted rows
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    skip_errors: bool = False
    max_errors: int = Field(default=DEFAULT_MAX_ERRORS, ge=1)
    validate_only: bool = False

    @classmethod
    def coerce(
        cls,
        options: Union['TransformOptions', Dict[str, Any], None] = None,
        **overrides: Any
    ) -> 'TransformOptions':
        """
        Normalize the accepted option forms into a TransformOptions.

        Keyword overrides win over values in ``options``.

        Raises:
            pydantic.ValidationError: On unknown keys or invalid values
        """
        if options is None:
            values: Dict[str, Any] = {}
        elif isinstance(options, TransformOptions):
            if not overrides:
                return options
            values = options.model_dump()
        else:
            aliases = {to_camel(name): name for name in cls.model_fields}
            values = {aliases.get(key, key): value for key, value in dict(options).items()}
        values.update(overrides)
        return cls.model_validate(values)

    @classmethod
    def from_env(cls, defaults: Optional['TransformOptions'] = None) -> 'TransformOptions':
        """Build options from DATAMAPPER_* environment variables."""
        base = defaults or cls()
        return cls(
            skip_errors=get_env_bool(ENV_SKIP_ERRORS, base.skip_errors),
            max_errors=get_env_int(ENV_MAX_ERRORS, base.max_errors),
            validate_only=get_env_bool(ENV_VALIDATE_ONLY, base.validate_only),
        )
