# backEnd/app/schemas/conteo.py
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import EstadoConteoEnum
from .pagination import Pagination


class DetalleConteoInsumoCreate(BaseModel):
    id_insumo: int
    cantidad_contada: Decimal = Field(..., ge=0)
    costo_unitario_asignado: Decimal = Field(..., ge=0)


class ConteoMaestroCreate(BaseModel):
    id_empleado: int
    observaciones: Optional[str] = None
    # APLICADO solo se alcanza con /aplicar; el servicio lo rechaza aquí
    estado: EstadoConteoEnum = EstadoConteoEnum.EN_PROCESO
    fecha_conteo: Optional[datetime] = None


class ConteoCreate(BaseModel):
    maestro: ConteoMaestroCreate
    detalles: List[DetalleConteoInsumoCreate] = Field(..., min_length=1)


class DetalleConteoInsumo(BaseModel):
    id_detalle: int
    id_insumo: int
    cantidad_contada: Decimal
    costo_unitario_asignado: Decimal

    model_config = ConfigDict(from_attributes=True)


class DetalleConteoRefaccion(BaseModel):
    id_detalle: int
    id_refaccion: int
    id_lote: Optional[int] = None
    cantidad_contada: Decimal
    costo_unitario_asignado: Decimal

    model_config = ConfigDict(from_attributes=True)


class Conteo(BaseModel):
    id_conteo: int
    id_empleado: int
    fecha_conteo: Optional[datetime] = None
    observaciones: Optional[str] = None
    estado: EstadoConteoEnum
    fecha_aplicacion: Optional[datetime] = None
    detalles_insumo: List[DetalleConteoInsumo] = []
    detalles_refaccion: List[DetalleConteoRefaccion] = []

    model_config = ConfigDict(from_attributes=True)


class ConteoResumen(BaseModel):
    id_conteo: int
    fecha_conteo: Optional[datetime] = None
    observaciones: Optional[str] = None
    estado: EstadoConteoEnum
    nombre_empleado: Optional[str] = None
    total_detalles: int = 0


ConteoPagination = Pagination[ConteoResumen]


# --- Inventario inicial ---

class InventarioInicialMaestro(BaseModel):
    id_empleado: int
    fecha_conteo: datetime
    motivo: str = Field(..., min_length=1)


class InventarioInicialRefaccion(BaseModel):
    id_refaccion: int
    cantidad: Decimal = Field(..., gt=0)
    costo: Decimal = Field(..., ge=0)


class InventarioInicialInsumo(BaseModel):
    id_insumo: int
    cantidad: Decimal = Field(..., ge=0)
    costo: Decimal = Field(..., ge=0)


class InventarioInicialCreate(BaseModel):
    maestro: InventarioInicialMaestro
    detalles_refacciones: List[InventarioInicialRefaccion] = []
    detalles_insumos: List[InventarioInicialInsumo] = []
