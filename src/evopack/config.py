"""
Run configuration loading.

A run file is YAML with two sections::

    domain:
      type: annulus
      inner_radius: 3
      outer_radius: 10
    ga:
      individual_size: 12
      radius: 1.0
      population_size: 80
      generations: 300
      seed: 7

Every key of ``ga`` must be a :class:`~evopack.engine.GAConfig` field (progress
callbacks excluded). Values are validated by ``GAConfig`` itself.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from evopack.core.errors import ConfigurationError, ConfigValidationError
from evopack.domains.base import Domain
from evopack.domains.factory import DomainType, create_domain
from evopack.engine import GAConfig

GA_FIELDS = frozenset(f.name for f in dataclasses.fields(GAConfig) if not f.name.startswith("on_"))


@dataclass
class RunConfig:
    domain_type: DomainType
    domain_params: dict[str, float] = field(default_factory=dict)
    ga: GAConfig = field(default_factory=GAConfig)

    def build_domain(self) -> Domain:
        return create_domain(self.domain_type, self.domain_params)


def check_radius_fits(domain: Domain, radius: float) -> None:
    """Reject gene radii larger than half the smaller bounding-box side."""
    box = domain.bounding_box()
    limit = min(box.width, box.height) / 2.0
    if radius > limit:
        raise ConfigurationError(f"radius {radius:.4g} cannot exceed {limit:.4g} for this domain")


def parse_run_config(data: Mapping[str, Any]) -> RunConfig:
    """Build a :class:`RunConfig` from an already parsed mapping.

    Raises
    ------
    ConfigValidationError
        Structural problems (missing sections, unknown keys).
    ConfigurationError
        Invalid values, raised by the domain factory or ``GAConfig``.
    """
    if not isinstance(data, Mapping):
        raise ConfigValidationError("Run configuration must be a mapping")
    unknown_sections = sorted(set(data) - {"domain", "ga"})
    if unknown_sections:
        raise ConfigValidationError(f"Unknown section(s): {', '.join(unknown_sections)}")

    domain_section = data.get("domain")
    if not isinstance(domain_section, Mapping) or "type" not in domain_section:
        raise ConfigValidationError("'domain' section with a 'type' key is required")
    domain_type = DomainType.from_name(str(domain_section["type"]))
    domain_params = {k: v for k, v in domain_section.items() if k != "type"}

    ga_section = data.get("ga") or {}
    if not isinstance(ga_section, Mapping):
        raise ConfigValidationError("'ga' must be a mapping")
    unknown = sorted(set(ga_section) - GA_FIELDS)
    if unknown:
        raise ConfigValidationError(f"Unknown 'ga' field(s): {', '.join(unknown)}")

    run = RunConfig(domain_type=domain_type, domain_params=dict(domain_params), ga=GAConfig(**ga_section))
    # fail fast on geometry as well
    check_radius_fits(run.build_domain(), run.ga.radius)
    return run


def load_run_config(path: str | Path) -> RunConfig:
    """Load and validate a YAML run file."""
    config_file = Path(path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")
    try:
        with open(config_file) as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {exc}") from exc
    if data is None:
        raise ConfigValidationError("Configuration file is empty")
    return parse_run_config(data)
