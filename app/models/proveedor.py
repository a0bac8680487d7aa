# backEnd/app/models/proveedor.py

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from .base import Base

class Proveedor(Base):
    __tablename__ = 'proveedor'

    id_proveedor = Column(Integer, primary_key=True, index=True)
    nombre_proveedor = Column(String(150), nullable=False)
    rfc = Column(String(20), nullable=True)
    telefono = Column(String(30), nullable=True)

    entradas = relationship("EntradaAlmacen", back_populates="proveedor")

    def __repr__(self):
        return f"<Proveedor(id={self.id_proveedor}, nombre='{self.nombre_proveedor}')>"
