# backEnd/app/models/insumo.py

from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint

from .base import Base


class Insumo(Base):
    __tablename__ = "insumo"

    id_insumo = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(150), nullable=False)
    marca = Column(String(80), nullable=True)
    tipo_insumo = Column(String(80), nullable=True)
    unidad_medida = Column(String(30), nullable=True)
    stock_minimo = Column(Numeric(12, 2), default=0, nullable=False)

    # Existencia viva y costo promedio ponderado; solo los servicios de valuación los modifican
    stock_actual = Column(Numeric(12, 2), default=0, nullable=False)
    costo_unitario_promedio = Column(Numeric(12, 4), default=0, nullable=False)

    __table_args__ = (
        CheckConstraint('stock_actual >= 0', name='chk_insumo_stock_no_negativo'),
        CheckConstraint('costo_unitario_promedio >= 0', name='chk_insumo_costo_no_negativo'),
    )

    def __repr__(self):
        return f"<Insumo(id_insumo={self.id_insumo}, nombre='{self.nombre}', stock={self.stock_actual}, costo={self.costo_unitario_promedio})>"
