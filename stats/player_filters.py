"""
Filtros de jogadores (Defesa, Shai) e cálculo de gearscore

- Normalização de nomes (trim + minúsculas)
- Lista fixa de famílias/nicks de Defesa
- Elegibilidade para estatísticas gerais
"""
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

Number = Union[int, float]


# =====================================================
# Constantes
# =====================================================

# Famílias/nicks de Defesa (sempre minúsculas, comparar via normalize_name)
DEFENSE_FAMILIES = frozenset({
    "teste",
    "lagswitch",
    "garciagil",
    "oat",
    "haleluya",
    "fberg",
    "dxvn",
    "zedobambu",
    "kingthepower",
    "faellz",
    "overblow",
    "schwarzfang",
    "vallimi",
    "witte",
    "miih",
    "dolkey",
    "lumine",
    "wise_dragon",
    "viserys",
    "usbx",
    "dayrell",
    "asuna",
    "deustorresmo",
    "sawttisen",
})

DEFENSE_CLASS = "defesa"
SHAI_CLASS = "shai"


@dataclass(frozen=True)
class PlayerRecord:
    """Registro de jogador usado nos filtros e estatísticas"""
    family_name: Optional[str] = None
    character_name: Optional[str] = None
    main_class: Optional[str] = None
    ap: Optional[Number] = None
    aap: Optional[Number] = None
    dp: Optional[Number] = None

    @property
    def gearscore(self) -> Number:
        return compute_gearscore(self.ap, self.aap, self.dp)


def normalize_name(name: Any) -> str:
    """None/vazio → "", senão trim + minúsculas"""
    return str(name or "").strip().lower()


def is_defense_class(class_name: Any) -> bool:
    return normalize_name(class_name) == DEFENSE_CLASS


def is_shai_class(class_name: Any) -> bool:
    return normalize_name(class_name) == SHAI_CLASS


def is_defense_player(record: PlayerRecord) -> bool:
    """
    Jogador de Defesa

    Verdadeiro se a classe for Defesa, ou se a família ou o personagem
    estiverem na lista DEFENSE_FAMILIES.
    """
    if is_defense_class(record.main_class):
        return True
    if normalize_name(record.family_name) in DEFENSE_FAMILIES:
        return True
    if normalize_name(record.character_name) in DEFENSE_FAMILIES:
        return True
    return False


def is_valid_for_stats(record: PlayerRecord) -> bool:
    """Elegível para estatísticas gerais (contagens/médias): exclui Shai e Defesa"""
    if is_shai_class(record.main_class):
        return False
    if is_defense_player(record):
        return False
    return True


def coerce_number(value: Any) -> Number:
    """
    Converte para número; ausente, inválido ou não finito vira 0

    Args:
        value: int, float, string numérica ou None

    Returns:
        int quando o valor é inteiro, senão float
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0

    try:
        number = float(str(value).strip())
    except ValueError:
        return 0

    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def compute_gearscore(ap: Any = None, aap: Any = None, dp: Any = None) -> Number:
    """Gearscore = max(AP, AAP) + DP (valores negativos não são rejeitados)"""
    return max(coerce_number(ap), coerce_number(aap)) + coerce_number(dp)
