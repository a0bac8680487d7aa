# backEnd/app/models/empleado.py

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base
from .enums import EstadoCuentaEnum


class Empleado(Base):
    """Empleado del almacén. También es la cuenta de acceso al sistema."""
    __tablename__ = 'empleado'

    id_empleado = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(150), nullable=False)
    puesto = Column(String(100), nullable=True)
    nombre_usuario = Column(String(50), unique=True, nullable=True, index=True)
    contrasena_hash = Column(String(255), nullable=True) # Hash bcrypt
    id_rol = Column(Integer, ForeignKey('roles.id_rol', ondelete='SET NULL'), nullable=True)
    estado_cuenta = Column(Enum(EstadoCuentaEnum), default=EstadoCuentaEnum.activo, nullable=False)
    fecha_creacion = Column(DateTime, default=func.now(), nullable=True)

    rol = relationship("Rol", back_populates="empleados")
    sesiones = relationship("SesionActiva", back_populates="empleado", cascade="all, delete-orphan")

    @property
    def nombre_rol(self):
        return self.rol.nombre_rol if self.rol else None

    def __repr__(self):
        return f"<Empleado(id={self.id_empleado}, nombre_usuario='{self.nombre_usuario}')>"
