"""
Airfoil polar lookup for actuator wings.

Maps a sectional angle of attack (radians) to lift and drag coefficients,
either from a tabulated polar or from thin-airfoil theory.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from ..core.interpolation import InvalidTableLengths, linear, linear_many

logger = logging.getLogger(__name__)


class AirfoilLookup(ABC):
    """
    Base class for sectional aerodynamic coefficient lookups.

    Calling a lookup with an angle of attack (scalar or array, radians)
    returns the matching lift and drag coefficients.
    """

    @abstractmethod
    def __call__(self, aoa):
        """
        Look up lift and drag coefficients.

        Args:
            aoa: Angle of attack (radians), scalar or array

        Returns:
            Tuple of (cl, cd) with the same shape as ``aoa``
        """
        pass


class AirfoilTable(AirfoilLookup):
    """
    Tabulated airfoil polar.

    Coefficients are linearly interpolated in angle of attack. Angles beyond
    the tabulated range return the nearest tabulated coefficients.

    Attributes:
        aoa: Angle of attack samples (radians), increasing
        cl: Lift coefficient samples
        cd: Drag coefficient samples
        cm: Moment coefficient samples, or None
        name: Airfoil name
    """

    def __init__(
        self,
        aoa,
        cl,
        cd,
        cm=None,
        aoa_in_degrees: bool = True,
        name: str = 'airfoil'
    ):
        """
        Build a polar from coefficient arrays.

        Args:
            aoa: Angle of attack samples, increasing
            cl: Lift coefficients at each sample
            cd: Drag coefficients at each sample
            cm: Optional moment coefficients at each sample
            aoa_in_degrees: Convert ``aoa`` from degrees to radians
            name: Airfoil name used in log messages
        """
        aoa = np.asarray(aoa, dtype=float)
        cl = np.asarray(cl, dtype=float)
        cd = np.asarray(cd, dtype=float)

        for label, column in (('cl', cl), ('cd', cd)):
            if len(column) != len(aoa):
                raise InvalidTableLengths(
                    f"{label} column of '{name}' has {len(column)} entries, "
                    f"expected {len(aoa)}"
                )

        if cm is not None:
            cm = np.asarray(cm, dtype=float)
            if len(cm) != len(aoa):
                raise InvalidTableLengths(
                    f"cm column of '{name}' has {len(cm)} entries, expected {len(aoa)}"
                )

        self.aoa = np.radians(aoa) if aoa_in_degrees else aoa
        self.cl = cl
        self.cd = cd
        self.cm = cm
        self.name = name

        # Lift and drag share one bracketing search per query
        self._coeffs = np.column_stack([self.cl, self.cd])

    @classmethod
    def from_csv(cls, csv_path, aoa_in_degrees: bool = True) -> 'AirfoilTable':
        """
        Load a polar from a CSV file.

        Expected format (header comments are optional)::

            # Airfoil: NACA 0012
            alpha,cl,cd,cm
            -10.0,-1.05,0.019,0.003
            ...

        Column names are matched case-insensitively; ``cm`` is optional.

        Args:
            csv_path: Path to CSV file
            aoa_in_degrees: Whether the ``alpha`` column is in degrees

        Returns:
            AirfoilTable
        """
        csv_path = Path(csv_path)
        if not csv_path.exists():
            raise ValueError(f"Airfoil file not found: {csv_path}")

        metadata = _read_metadata(csv_path)

        df = pd.read_csv(csv_path, comment='#', skipinitialspace=True)
        df.columns = [str(col).strip().lower() for col in df.columns]

        missing = {'alpha', 'cl', 'cd'} - set(df.columns)
        if missing:
            raise ValueError(
                f"Airfoil file {csv_path} is missing columns: {sorted(missing)}"
            )

        df = df.sort_values('alpha', kind='stable')
        table = cls(
            df['alpha'].to_numpy(),
            df['cl'].to_numpy(),
            df['cd'].to_numpy(),
            cm=df['cm'].to_numpy() if 'cm' in df.columns else None,
            aoa_in_degrees=aoa_in_degrees,
            name=metadata.get('Airfoil', csv_path.stem),
        )

        logger.info(
            "Loaded airfoil '%s' from %s: %d points, alpha %.1f to %.1f deg",
            table.name, csv_path, len(table.aoa),
            np.degrees(table.aoa[0]) if len(table.aoa) else float('nan'),
            np.degrees(table.aoa[-1]) if len(table.aoa) else float('nan'),
        )
        return table

    def __call__(self, aoa):
        if np.ndim(aoa) == 0:
            cl, cd = linear(self.aoa, self._coeffs, aoa)
            return float(cl), float(cd)

        coeffs = linear_many(self.aoa, self._coeffs, aoa)
        return coeffs[..., 0], coeffs[..., 1]

    def moment(self, aoa) -> float:
        """Moment coefficient at ``aoa`` (radians)."""
        if self.cm is None:
            raise ValueError(f"Airfoil '{self.name}' has no moment coefficient column")
        return float(linear(self.aoa, self.cm, aoa))

    @property
    def aoa_range(self) -> Tuple[float, float]:
        """Tabulated angle-of-attack range (radians)."""
        return float(self.aoa[0]), float(self.aoa[-1])

    def __repr__(self):
        return f"AirfoilTable(name='{self.name}', points={len(self.aoa)})"


class ThinAirfoil(AirfoilLookup):
    """
    Flat-plate polar from thin-airfoil theory.

    Cl = 2*pi*aoa, Cd = 0.
    """

    def __call__(self, aoa):
        cl = 2.0 * np.pi * np.asarray(aoa, dtype=float)
        cd = np.zeros_like(cl)
        if cl.ndim == 0:
            return float(cl), float(cd)
        return cl, cd

    def __repr__(self):
        return "ThinAirfoil()"


def _read_metadata(csv_path: Path) -> Dict[str, str]:
    """Collect ``# key: value`` header comments."""
    metadata = {}
    with open(csv_path, 'r') as f:
        for line in f:
            if not line.startswith('#'):
                break
            if ':' in line:
                key, value = line[1:].split(':', 1)
                metadata[key.strip()] = value.strip()
    return metadata


def airfoil_from_dict(polar: Dict, name: Optional[str] = None) -> AirfoilTable:
    """
    Build a polar from an inline mapping with ``alpha`` (degrees), ``cl`` and
    ``cd`` lists, as found in wing configuration files.
    """
    return AirfoilTable(
        polar['alpha'],
        polar['cl'],
        polar['cd'],
        cm=polar.get('cm'),
        aoa_in_degrees=polar.get('aoa_in_degrees', True),
        name=name or polar.get('name', 'airfoil'),
    )
