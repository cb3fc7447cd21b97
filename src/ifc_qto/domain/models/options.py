"""Quantity Takeoff Options.

Caller-facing switches controlling extraction, geometry fallback and
output shaping.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from ifc_qto.domain.exceptions import ValidationError

MAX_ROUND_DECIMALS = 10


@dataclass(frozen=True)
class QtoOptions:
    """Options for a space quantity takeoff run.

    Attributes:
        all_params: Copy every quantity/property into extra fields
        use_geometry: Derive missing Area/Volume from geometry
        force_geometry: Always derive Area/Volume from geometry
        extra_params: Property names copied into extra fields
        rename_map: Output field renaming (old -> new)
        round: Decimal places for float output values (None = no rounding)
    """

    all_params: bool = False
    use_geometry: bool = False
    force_geometry: bool = False
    extra_params: tuple[str, ...] = ()
    rename_map: Mapping[str, str] = field(default_factory=dict)
    round: int | None = None

    def __post_init__(self) -> None:
        """Validate and normalize options."""
        if self.round is not None:
            if isinstance(self.round, bool) or not isinstance(self.round, int):
                raise ValidationError("round", "must be an integer", self.round)
            if not 0 <= self.round <= MAX_ROUND_DECIMALS:
                raise ValidationError(
                    "round", f"must be between 0 and {MAX_ROUND_DECIMALS}", self.round,
                )

        for old_key, new_key in self.rename_map.items():
            if not old_key or not new_key:
                raise ValidationError("rename_map", "keys and targets must be non-empty", (old_key, new_key))

        extra = tuple(name.strip() for name in self.extra_params if name and name.strip())
        object.__setattr__(self, "extra_params", extra)
        object.__setattr__(self, "rename_map", dict(self.rename_map))

    @property
    def needs_geometry(self) -> bool:
        """True when any geometry fallback may run."""
        return self.use_geometry or self.force_geometry

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> QtoOptions:
        """Create options from a loose mapping (e.g. tool arguments).

        Accepts ``extra_params`` as a list or a comma-separated string.

        Args:
            data: Option values keyed by field name

        Returns:
            Validated QtoOptions
        """
        extra: Iterable[str] = data.get("extra_params") or ()
        if isinstance(extra, str):
            extra = extra.split(",")

        return cls(
            all_params=bool(data.get("all_params", False)),
            use_geometry=bool(data.get("use_geometry", False)),
            force_geometry=bool(data.get("force_geometry", False)),
            extra_params=tuple(extra),
            rename_map=dict(data.get("rename_map") or {}),
            round=data.get("round"),
        )
