# backEnd/app/services/audit_service.py

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder

from ..database import SessionLocal
from ..models.audit_log import AuditoriaAccion

logger = logging.getLogger(__name__)


@dataclass
class EventoAuditoria:
    """Lo que una ruta quiere dejar registrado después de confirmar su transacción."""
    id_usuario: Optional[int]
    tipo_accion: str            # 'CREAR', 'ACTUALIZAR', 'APLICAR', 'DEVOLVER', 'LOGIN', ...
    recurso_afectado: str       # 'ajuste_inventario', 'prestamos', 'conteo_inventario', ...
    id_recurso_afectado: Optional[int] = None
    detalles_cambio: Dict[str, Any] = field(default_factory=dict)
    ip_address: Optional[str] = None


class AuditService:
    """
    Servicio de auditoría. Escribe en su propia sesión y nunca propaga errores:
    si la bitácora falla, la operación principal ya quedó confirmada.
    """

    # Se reemplaza en pruebas para apuntar a la base en memoria
    session_factory = SessionLocal

    @staticmethod
    def obtener_ip(request: Optional[Request]) -> Optional[str]:
        """IP real del cliente considerando proxies."""
        if request is None:
            return None
        ip_address = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
        if not ip_address:
            ip_address = request.headers.get("X-Real-IP", "")
        if not ip_address:
            ip_address = str(request.client.host) if request.client else None
        return ip_address

    @staticmethod
    def evento(
        current_user,
        tipo_accion: str,
        recurso_afectado: str,
        id_recurso_afectado: Optional[int] = None,
        detalles_cambio: Optional[Dict[str, Any]] = None,
        request: Optional[Request] = None,
    ) -> EventoAuditoria:
        return EventoAuditoria(
            id_usuario=getattr(current_user, "id_empleado", None),
            tipo_accion=tipo_accion,
            recurso_afectado=recurso_afectado,
            id_recurso_afectado=id_recurso_afectado,
            # Decimal y datetime se pasan a tipos JSON antes de salir de la petición
            detalles_cambio=jsonable_encoder(detalles_cambio or {}),
            ip_address=AuditService.obtener_ip(request),
        )

    @classmethod
    def registrar(cls, evento: EventoAuditoria) -> None:
        """Consumidor del evento. Se ejecuta como BackgroundTask, fuera de la transacción de la ruta."""
        db = cls.session_factory()
        try:
            db.add(AuditoriaAccion(
                id_usuario=evento.id_usuario,
                tipo_accion=evento.tipo_accion,
                recurso_afectado=evento.recurso_afectado,
                id_recurso_afectado=evento.id_recurso_afectado,
                detalles_cambio=evento.detalles_cambio,
                ip_address=evento.ip_address,
            ))
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                f"Error al registrar auditoría ({evento.tipo_accion} {evento.recurso_afectado} "
                f"{evento.id_recurso_afectado}): {e}",
                exc_info=True,
            )
        finally:
            db.close()

    @staticmethod
    def serialize_model(model_instance) -> Dict[str, Any]:
        """
        Convierte una instancia del modelo SQLAlchemy a un diccionario
        para almacenar en los logs
        """
        if not model_instance:
            return {}
        return jsonable_encoder({
            column.name: getattr(model_instance, column.name)
            for column in model_instance.__table__.columns
        })
