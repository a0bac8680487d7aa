# backEnd/app/models/sesion.py

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base
from .enums import EstadoSesionEnum


class SesionActiva(Base):
    __tablename__ = 'sesiones_activas'

    id_sesion = Column(Integer, primary_key=True, index=True)
    id_usuario = Column(Integer, ForeignKey('empleado.id_empleado', ondelete='CASCADE'), nullable=False)
    token_jwt = Column(Text, nullable=False)
    user_agent = Column(Text, nullable=True)
    ip_address = Column(String(64), nullable=True)
    fecha_inicio = Column(DateTime, default=func.now(), nullable=False)
    fecha_expiracion_token = Column(DateTime(timezone=True), nullable=True)
    estado = Column(Enum(EstadoSesionEnum), default=EstadoSesionEnum.activo, nullable=False)

    empleado = relationship("Empleado", back_populates="sesiones")
