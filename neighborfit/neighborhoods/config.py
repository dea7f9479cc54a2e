from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DEFAULT_CSV = Path(__file__).resolve().parent.parent / "data" / "neighborhoods.csv"


@dataclass(frozen=True)
class DataStoreConfig:
    csv_path: Path = Path(os.getenv("NEIGHBORFIT_DATA_CSV", str(_DEFAULT_CSV)))


DEFAULT_DATA_STORE_CONFIG = DataStoreConfig()
