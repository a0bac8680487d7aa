# backEnd/app/models/audit_log.py

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from .base import Base


class AuditoriaAccion(Base):
    __tablename__ = 'auditoria_acciones'

    id_auditoria = Column(Integer, primary_key=True, index=True)
    id_usuario = Column(Integer, ForeignKey('empleado.id_empleado', ondelete='SET NULL'), nullable=True)
    tipo_accion = Column(String(50), nullable=False, index=True)  # 'CREAR', 'ACTUALIZAR', 'APLICAR', ...
    recurso_afectado = Column(String(80), nullable=False, index=True)  # 'ajuste_inventario', 'prestamos', ...
    id_recurso_afectado = Column(Integer, nullable=True)
    detalles_cambio = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    ip_address = Column(String(64), nullable=True)
    fecha = Column(DateTime, default=func.now(), nullable=False, index=True)

    usuario = relationship("Empleado", foreign_keys=[id_usuario])

    def __repr__(self):
        return f"<AuditoriaAccion(id={self.id_auditoria}, usuario={self.id_usuario}, recurso='{self.recurso_afectado}', accion='{self.tipo_accion}')>"
