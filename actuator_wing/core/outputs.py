"""
Per-step diagnostics of actuator wings.

Collects lift/drag totals and per-point sectional data every
``output_frequency`` steps and exposes them as pandas DataFrames.
"""

from typing import Dict, List

import numpy as np
import pandas as pd


class WingOutputs:
    """
    In-memory diagnostic sink for one wing.

    Parameters
    ----------
    label : str
        Wing name stored with every record
    output_frequency : int
        Record every N-th completed step (steps whose index is a multiple of N)
    """

    def __init__(self, label: str, output_frequency: int = 10):
        if output_frequency < 1:
            raise ValueError(f"output_frequency must be >= 1, got {output_frequency}")

        self.label = label
        self.output_frequency = output_frequency
        self.records: List[Dict] = []

    def should_write(self, time_index: int) -> bool:
        return time_index % self.output_frequency == 0

    def record(self, time: float, time_index: int, wdata) -> bool:
        """
        Store a snapshot of the wing outputs if this is an output step.

        Returns
        -------
        bool
            True if a record was stored
        """
        if not self.should_write(time_index):
            return False

        self.records.append({
            'time': time,
            'time_index': time_index,
            'lift': wdata.lift,
            'drag': wdata.drag,
            'aoa': np.array(wdata.aoa, copy=True),
            'cl': np.array(wdata.cl, copy=True),
            'cd': np.array(wdata.cd, copy=True),
            'vel_rel': np.array(wdata.vel_rel, copy=True),
        })
        return True

    def totals_dataframe(self) -> pd.DataFrame:
        """One row per recorded step: time, time_index, lift, drag."""
        return pd.DataFrame(
            [{'wing': self.label,
              'time': rec['time'],
              'time_index': rec['time_index'],
              'lift': rec['lift'],
              'drag': rec['drag']} for rec in self.records],
            columns=['wing', 'time', 'time_index', 'lift', 'drag'],
        )

    def to_dataframe(self) -> pd.DataFrame:
        """One row per actuator point per recorded step."""
        columns = ['wing', 'time', 'time_index', 'point', 'aoa', 'cl', 'cd',
                   'vel_rel_x', 'vel_rel_y', 'vel_rel_z']
        frames = []
        for rec in self.records:
            npts = len(rec['aoa'])
            frames.append(pd.DataFrame({
                'wing': self.label,
                'time': rec['time'],
                'time_index': rec['time_index'],
                'point': np.arange(npts),
                'aoa': rec['aoa'],
                'cl': rec['cl'],
                'cd': rec['cd'],
                'vel_rel_x': rec['vel_rel'][:, 0],
                'vel_rel_y': rec['vel_rel'][:, 1],
                'vel_rel_z': rec['vel_rel'][:, 2],
            }, columns=columns))

        if not frames:
            return pd.DataFrame(columns=columns)
        return pd.concat(frames, ignore_index=True)

    def __len__(self):
        return len(self.records)
