# backEnd/app/models/rol.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base

class Rol(Base):
    __tablename__ = 'roles'

    id_rol = Column(Integer, primary_key=True, index=True)
    nombre_rol = Column(String(50), unique=True, nullable=False) # 'Admin', 'Almacenista', 'SuperUsuario'

    empleados = relationship("Empleado", back_populates="rol")

    def __repr__(self):
        return f"<Rol(id={self.id_rol}, nombre_rol='{self.nombre_rol}')>"
