"""Configuration models for drainage field evaluation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


DEFAULT_SEED = 0
DEFAULT_EPS = 0.0


class ConfigError(ValueError):
    """Raised when a field configuration cannot be evaluated."""


@dataclass(frozen=True)
class DomainConfig:
    """Maps the evaluated plane onto the base noise sampling rectangle."""

    noise_top_left: tuple[float, float] = (-8.0, -8.0)
    noise_bottom_right: tuple[float, float] = (8.0, 8.0)
    perlin_top_left: tuple[float, float] = (0.0, 0.0)
    perlin_bottom_right: tuple[float, float] = (4.0, 4.0)


@dataclass(frozen=True)
class LayerConfig:
    """Display toggles and falloff radii for each rendered layer."""

    display_points: bool = True
    display_segments: bool = True
    display_grid: bool = True
    point_radius: float = 0.0625
    chain_node_radius: float = 0.03125
    segment_radius: float = 0.015625
    grid_radius: float = 0.0078125
    fine_point_radius: float = 0.03125
    fine_segment_radius: float = 0.0078125
    fine_grid_radius: float = 0.00390625
    fine_grid_offset: float = 0.5
    falloff_exponent: float = 2.0


@dataclass(frozen=True)
class WindowConfig:
    """Window sizes, subdivision count and neighborhood radii."""

    coarse_points: int = 9
    fine_points: int = 5
    subdivisions: int = 2
    cache_size: int = 32
    segment_neighborhood: int = 1
    refine_neighborhood: int = 1
    fine_segment_neighborhood: int = 2
    worley_neighborhood: int = 2

    @property
    def coarse_segments(self) -> int:
        return self.coarse_points - 2

    @property
    def coarse_chains(self) -> int:
        return self.coarse_points - 4

    @property
    def upper_resolution_points(self) -> int:
        """Coarse cells spanned by the fine window."""

        return 2 * ((self.fine_points + 1) // 4) + 1


@dataclass(frozen=True)
class FieldConfig:
    """Primary construction parameters of a drainage field."""

    seed: int = DEFAULT_SEED
    eps: float = DEFAULT_EPS
    domain: DomainConfig = field(default_factory=DomainConfig)
    layers: LayerConfig = field(default_factory=LayerConfig)
    windows: WindowConfig = field(default_factory=WindowConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        """Raise `ConfigError` if the configuration is structurally unusable."""

        if not 0.0 <= self.eps <= 1.0:
            raise ConfigError(f"eps must be in [0, 1], got {self.eps}")
        validate_domain(self.domain)
        validate_layers(self.layers)
        validate_windows(self.windows)


def validate_domain(domain: DomainConfig) -> None:
    for axis, name in ((0, "x"), (1, "y")):
        start = domain.noise_top_left[axis]
        end = domain.noise_bottom_right[axis]
        if not start < end:
            raise ConfigError(
                f"noise domain must satisfy top_left.{name} < bottom_right.{name}, got {start} and {end}"
            )


def validate_layers(layers: LayerConfig) -> None:
    radii = {
        "point_radius": layers.point_radius,
        "chain_node_radius": layers.chain_node_radius,
        "segment_radius": layers.segment_radius,
        "grid_radius": layers.grid_radius,
        "fine_point_radius": layers.fine_point_radius,
        "fine_segment_radius": layers.fine_segment_radius,
        "fine_grid_radius": layers.fine_grid_radius,
    }
    for name, value in radii.items():
        if value <= 0.0:
            raise ConfigError(f"{name} must be positive, got {value}")
    if layers.falloff_exponent < 0.0:
        raise ConfigError("falloff_exponent must be >= 0")


def validate_windows(windows: WindowConfig) -> None:
    """Check the size relationships between consecutive pipeline windows."""

    n = windows.coarse_points
    f = windows.fine_points

    if n % 2 == 0 or f % 2 == 0:
        raise ConfigError(f"window sizes must be odd, got coarse={n} fine={f}")
    if n < 5:
        raise ConfigError(f"coarse window needs at least 5 points per side, got {n}")
    if f < 3:
        raise ConfigError(f"fine window needs at least 3 points per side, got {f}")
    if windows.subdivisions < 2:
        raise ConfigError("segments should be subdivided in more than 1 part")

    for name in ("segment_neighborhood", "refine_neighborhood", "fine_segment_neighborhood", "worley_neighborhood"):
        if getattr(windows, name) < 0:
            raise ConfigError(f"{name} must be >= 0")

    up_res = windows.upper_resolution_points
    chains = windows.coarse_chains
    if n < up_res:
        raise ConfigError(
            f"not enough points in the vicinity to replace the fine points: need {up_res}, have {n}"
        )
    if chains < up_res + 2 * windows.refine_neighborhood:
        raise ConfigError(
            "not enough chains in the vicinity to connect fine points: "
            f"need {up_res + 2 * windows.refine_neighborhood}, have {chains}"
        )
    coarse_reach = max(windows.segment_neighborhood, windows.worley_neighborhood)
    if chains < 2 * coarse_reach + 1:
        raise ConfigError(f"chain window of {chains} cannot cover a neighborhood of {coarse_reach}")
    if f < 2 * windows.fine_segment_neighborhood + 1:
        raise ConfigError(
            f"fine window of {f} cannot cover a neighborhood of {windows.fine_segment_neighborhood}"
        )
    if f < 2 * windows.worley_neighborhood + 1:
        raise ConfigError(f"fine window of {f} cannot cover a neighborhood of {windows.worley_neighborhood}")
    if windows.cache_size < n:
        raise ConfigError(f"cache_size must be at least the coarse window size {n}, got {windows.cache_size}")
