"""
Parameter catalog of the real-time web service.
"""

from typing import Dict, List

import pandas as pd

from .exceptions import InvalidArgumentError
from .models import ParameterInfo

PARAMETER_CATALOG: Dict[int, ParameterInfo] = {
    info.parameter: info
    for info in [
        ParameterInfo(46, "HG", "m", "Water level (primary sensor)", "Niveau d'eau (capteur primaire)"),
        ParameterInfo(16, "HG2", "m", "Water level (secondary sensor)", "Niveau d'eau (capteur secondaire)"),
        ParameterInfo(52, "HG3", "m", "Water level (tertiary sensor)", "Niveau d'eau (capteur tertiaire)"),
        ParameterInfo(47, "QR", "m3/s", "Discharge (primary sensor derived)", "Débit (dérivé du capteur primaire)"),
        ParameterInfo(8, "QRS", "m3/s", "Discharge (sensor)", "Débit (capteur)"),
        ParameterInfo(5, "TW", "°C", "Water temperature", "Température de l'eau"),
        ParameterInfo(41, "WV", "m/s", "Water velocity", "Vitesse de l'eau"),
        ParameterInfo(18, "PC", "mm", "Precipitation (accumulated)", "Précipitations (cumulées)"),
    ]
}

DEFAULT_PARAMETERS: List[int] = [46, 16, 52, 47, 8, 5, 41, 18]


def lookup_parameter(parameter: int) -> ParameterInfo:
    try:
        return PARAMETER_CATALOG[int(parameter)]
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"Unknown parameter code '{parameter}'. Available: {sorted(PARAMETER_CATALOG)}"
        ) from e


def param_id() -> pd.DataFrame:
    """The catalog as a DataFrame: ``Parameter, Code, Unit, Name_En, Name_Fr``."""
    return pd.DataFrame(
        [
            {
                "Parameter": info.parameter,
                "Code": info.code,
                "Unit": info.unit,
                "Name_En": info.name_en,
                "Name_Fr": info.name_fr,
            }
            for info in PARAMETER_CATALOG.values()
        ]
    )
