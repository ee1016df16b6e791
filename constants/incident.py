# constants/incident.py
"""缺陷（Incident）相关枚举；value 为数据中使用的本地化标签。"""

from enum import Enum


class IncidentStatus(Enum):
    OPEN = "Abierto"
    IN_PROGRESS = "En Progreso"
    RESOLVED = "Resuelto"
    CLOSED = "Cerrado"

    @classmethod
    def values(cls):
        return [m.value for m in cls]


DEFAULT_INCIDENT_STATUS = IncidentStatus.OPEN.value
