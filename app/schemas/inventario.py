# backEnd/app/schemas/inventario.py
from typing import Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict


class LoteRead(BaseModel):
    id_lote: int
    id_refaccion: int
    id_detalle_entrada: Optional[int] = None
    cantidad_inicial: Decimal
    cantidad_disponible: Decimal
    costo_unitario_subtotal: Decimal
    monto_iva_unitario: Decimal
    costo_unitario_final: Decimal
    fecha_ingreso: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StockRefaccion(BaseModel):
    id_refaccion: int
    nombre: str
    numero_parte: Optional[str] = None
    stock_actual: Decimal
    valor_inventario: Decimal
    stock_minimo: Decimal
    bajo_minimo: bool


class InsumoRead(BaseModel):
    id_insumo: int
    nombre: str
    marca: Optional[str] = None
    tipo_insumo: Optional[str] = None
    unidad_medida: Optional[str] = None
    stock_actual: Decimal
    costo_unitario_promedio: Decimal
    stock_minimo: Decimal
    bajo_minimo: bool = False

    model_config = ConfigDict(from_attributes=True)
