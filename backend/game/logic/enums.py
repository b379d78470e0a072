"""
String enum definitions for domino game concepts.
"""

from enum import StrEnum


class VictoryType(StrEnum):
    """How a round was won. Each type carries a fixed base point value (see rules.py)."""

    SIMPLE = "simple"
    CARROCA = "carroca"
    LA_E_LO = "la_e_lo"
    CRUZADA = "cruzada"
    CONTAGEM = "contagem"
    EMPATE = "empate"  # tie: no points, grants a bonus point to the next winner


class GameStatus(StrEnum):
    """Lifecycle of a single game."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
