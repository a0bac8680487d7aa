# backEnd/app/schemas/ajuste.py
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import TipoAjusteEnum
from .pagination import Pagination


class DetalleAjusteCreate(BaseModel):
    # Exactamente uno de los dos; el servicio lo valida
    id_refaccion: Optional[int] = None
    id_insumo: Optional[int] = None
    id_lote: Optional[int] = None  # Obligatorio en SALIDA/REVALORIZACION de refacciones
    cantidad: Decimal = Decimal(0)
    costo_ajuste: Decimal = Decimal(0)


class AjusteMaestroCreate(BaseModel):
    id_empleado: int
    tipo_ajuste: TipoAjusteEnum
    motivo: str = Field(..., min_length=1)


class AjusteCreate(BaseModel):
    maestro: AjusteMaestroCreate
    detalles: List[DetalleAjusteCreate] = []


class DetalleAjuste(BaseModel):
    id_detalle: int
    id_refaccion: Optional[int] = None
    id_insumo: Optional[int] = None
    id_lote_refaccion: Optional[int] = None
    cantidad: Decimal
    costo_ajuste: Decimal

    model_config = ConfigDict(from_attributes=True)


class Ajuste(BaseModel):
    id_ajuste: int
    id_empleado: int
    tipo_ajuste: TipoAjusteEnum
    motivo: str
    fecha_ajuste: Optional[datetime] = None
    fecha_modificacion: Optional[datetime] = None
    detalles: List[DetalleAjuste] = []

    model_config = ConfigDict(from_attributes=True)


class AjusteResumen(BaseModel):
    id_ajuste: int
    tipo_ajuste: TipoAjusteEnum
    motivo: str
    fecha_ajuste: Optional[datetime] = None
    nombre_empleado: Optional[str] = None
    total_lineas: int = 0


AjustePagination = Pagination[AjusteResumen]
