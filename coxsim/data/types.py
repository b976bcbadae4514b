"""Core enumerations for the simulation framework."""

from enum import Enum, auto
from typing import Union


class SimulationType(Enum):
    """Generative mode for simulated durations."""

    STATIC = auto()  # Fixed covariates and coefficients
    TVC = auto()  # Time-varying covariates
    TVBETA = auto()  # Time-varying coefficients

    @classmethod
    def parse(cls, value: Union[str, "SimulationType"]) -> "SimulationType":
        """Convert a mode name to a SimulationType.

        "none" is accepted as an alias of "static".

        Args:
            value: Mode name or SimulationType.

        Returns:
            SimulationType instance.

        Raises:
            ValueError: If the name is not a known mode.
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip().lower()
        if name == "none":
            name = "static"
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown simulation type: {value!r}. "
                f"Available: ['none', 'static', 'tvc', 'tvbeta']"
            ) from None
