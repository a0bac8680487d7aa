# backEnd/app/schemas/audit_log.py

from typing import Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from .pagination import Pagination


class AuditoriaRead(BaseModel):
    id_auditoria: int
    id_usuario: Optional[int] = None
    tipo_accion: str        # 'CREAR', 'ACTUALIZAR', 'APLICAR', 'DEVOLVER', 'LOGIN'...
    recurso_afectado: str
    id_recurso_afectado: Optional[int] = None
    detalles_cambio: Optional[Any] = None
    ip_address: Optional[str] = None
    fecha: datetime

    model_config = ConfigDict(from_attributes=True)


# Paginación para auditoría
AuditoriaPagination = Pagination[AuditoriaRead]
