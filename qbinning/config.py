"""
Numerical defaults for bin construction and sampling.

A SamplingConfig is an immutable bundle of tolerances and Gaussian-sampling
parameters. Functions that need one take it as an explicit ``config``
argument; when it is omitted, ``SamplingConfig()`` is used. A BinSpec
carries the configuration it was built with, so samplers and the
membership filter working on that bin use the same tolerances.

Configurations can be stored as YAML:

    spacing_rtol: 1.0e-9
    spacing_atol: 1.0e-12
    gaussian_density: 5.0
    gaussian_nsigmas: 3.0
"""

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, Union

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplingConfig:
    """
    Numerical defaults.

    Attributes
    ----------
    spacing_rtol : float
        Relative tolerance when checking that axis values are uniformly spaced
    spacing_atol : float
        Absolute tolerance for the same check
    singular_tol : float
        Direction frames with a condition number above this are singular
    boundary_rtol : float
        Slack on bin faces, relative to the bin width, when testing membership
    boundary_atol : float
        Absolute slack on bin faces, in local coordinates
    gaussian_density : float
        Grid points per 3σ along the narrowest principal axis
    gaussian_nsigmas : float
        Margin, in standard deviations, added around a bin for Gaussian sampling
    """
    spacing_rtol: float = 1e-9
    spacing_atol: float = 1e-12
    singular_tol: float = 1e12
    boundary_rtol: float = 1e-9
    boundary_atol: float = 1e-12
    gaussian_density: float = 5.0
    gaussian_nsigmas: float = 3.0

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) <= 0:
                raise ValueError(f"{f.name} must be positive, got {getattr(self, f.name)}")

    def to_dict(self) -> Dict:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> 'SamplingConfig':
        """
        Build from a dictionary, falling back to defaults for missing keys.

        Raises
        ------
        ValueError
            If the dictionary contains unknown keys
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}. "
                             f"Available keys: {', '.join(sorted(known))}")
        return cls(**{key: float(value) for key, value in data.items()})


def resolve_config(config=None) -> SamplingConfig:
    """Return config, or the defaults when it is None."""
    if config is None:
        return SamplingConfig()
    if not isinstance(config, SamplingConfig):
        raise TypeError("config must be a SamplingConfig instance")
    return config


def load_config(path: Union[str, Path]) -> SamplingConfig:
    """
    Load a configuration from a YAML file.

    Parameters
    ----------
    path : str or Path
        YAML file holding a flat mapping of SamplingConfig fields. An empty
        file gives the defaults.

    Returns
    -------
    config : SamplingConfig

    Raises
    ------
    TypeError
        If the file does not contain a mapping at top level
    """
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TypeError(f"{path} must contain a mapping at top level")

    config = SamplingConfig.from_dict(data)
    logger.debug("Loaded sampling configuration from %s: %s", path, config)
    return config
