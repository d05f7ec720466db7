"""Command input and dependency validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel

from sim.core.models.errors import ConfigurationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for terminal output.

    Removes internal fields like:
    - url
    - ctx
    - input
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "input"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        if "field required" in msg.lower():
            msg = "This field is required"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate command input against a Pydantic model.

    Raises:
        pydantic.ValidationError: If the input is invalid
    """
    return model.model_validate(data)


def require_dependencies(**dependencies: Any) -> None:
    """Raise if any of the named dependencies is missing.

    Raises:
        ConfigurationError: Listing every missing dependency
    """
    missing = [name for name, dependency in dependencies.items() if dependency is None]

    if missing:
        raise ConfigurationError(
            message=(
                f"unable to initialize service due to ({len(missing)}) "
                f"missing dependencies: {','.join(missing)}"
            ),
            details={"missing": missing},
        )
