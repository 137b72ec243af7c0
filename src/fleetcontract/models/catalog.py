"""Fixed option lists and enums shared by the form and the store."""

from enum import Enum


class ContractType(str, Enum):
    """Contract categories. Each has its own number sequence."""

    CM = "CM"  # Maintenance contract
    APV = "APV"  # After-sales


class ContractStatus(str, Enum):
    """Contract status values as stored."""

    ACTIVE = "Ativo"
    PENDING = "Pendente"
    CLOSED = "Fechado"
    COURTESY = "Cortesia"


class VehicleStatus(str, Enum):
    """Vehicle status values as stored."""

    ACTIVE = "Ativo"
    INACTIVE = "Inativo"
    SOLD = "Vendido"
    WRECKED = "Sinistrado"


PROVINCES = [
    "Luanda", "Bengo", "Benguela", "Bié", "Cabinda",
    "Cuando Cubango", "Cuanza Norte", "Cuanza Sul", "Cunene",
    "Huambo", "Huíla", "Lunda Norte", "Lunda Sul",
    "Malanje", "Moxico", "Namibe", "Uíge", "Zaire",
]

VEHICLE_MODELS: dict[str, list[str]] = {
    "Volvo": [
        "Volvo FMX 440",
        "Volvo FMX 480",
        "Volvo FMX 520",
        "Volvo FH 460",
        "Volvo FH 520",
        "Volvo FH 540",
        "Volvo FL 240",
        "Volvo FL 280",
        "Volvo FL 420",
        "Volvo FM 380",
        "Volvo FM 420",
    ],
    "Dongfeng": [
        "Dongfeng KX 560",
        "Dongfeng KL 465",
        "Dongfeng KC 450",
        "Dongfeng KC 385",
        "Dongfeng KL 450",
        "Dongfeng KR 220",
        "Dongfeng KR 190",
        "Captan 125",
    ],
}

VEHICLE_MAKES = list(VEHICLE_MODELS)

OPERATION_TYPES = [
    "Transporte de Contentores",
    "Construção",
    "Mineração",
    "Distribuição",
    "Transporte de Combustível",
    "Transporte de Carga Geral",
    "Outro",
]


def models_for(make: str) -> list[str]:
    """Return the model options for a make (empty for unknown makes)."""
    return list(VEHICLE_MODELS.get(make, []))
