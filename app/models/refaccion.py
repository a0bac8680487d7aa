# backEnd/app/models/refaccion.py

from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base


class Refaccion(Base):
    """
    Catálogo de refacciones. No guarda existencia ni costo: ambos se derivan
    de sus lotes (lote_refaccion).
    """
    __tablename__ = "refaccion"

    id_refaccion = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(150), nullable=False)
    numero_parte = Column(String(80), nullable=True)
    categoria = Column(String(80), nullable=True)
    marca = Column(String(80), nullable=True)
    unidad_medida = Column(String(30), nullable=True)
    ubicacion_almacen = Column(String(80), nullable=True)
    descripcion = Column(Text, nullable=True)
    stock_minimo = Column(Numeric(12, 2), default=0, nullable=False)
    stock_maximo = Column(Numeric(12, 2), nullable=True)

    lotes = relationship("LoteRefaccion", back_populates="refaccion", order_by="LoteRefaccion.id_lote")
    componentes = relationship(
        "RefaccionComponente",
        foreign_keys="[RefaccionComponente.id_refaccion_padre]",
        back_populates="padre",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Refaccion(id_refaccion={self.id_refaccion}, nombre='{self.nombre}')>"


class RefaccionComponente(Base):
    """Receta de producción: cuántas unidades de cada hijo consume una unidad del padre."""
    __tablename__ = "refaccion_componentes"

    id_componente = Column(Integer, primary_key=True, index=True)
    id_refaccion_padre = Column(Integer, ForeignKey('refaccion.id_refaccion', ondelete='CASCADE'), nullable=False)
    id_refaccion_hijo = Column(Integer, ForeignKey('refaccion.id_refaccion'), nullable=False)
    cantidad_necesaria = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (
        CheckConstraint('cantidad_necesaria > 0', name='chk_componente_cantidad_positiva'),
    )

    padre = relationship("Refaccion", foreign_keys=[id_refaccion_padre], back_populates="componentes")
    hijo = relationship("Refaccion", foreign_keys=[id_refaccion_hijo])
