# backEnd/app/schemas/prestamo.py
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

from ..models.enums import TipoItemEnum, EstadoPrestamoEnum, EstadoDevolucionEnum


class DetallePrestamoCreate(BaseModel):
    tipo_item: TipoItemEnum
    id_item: int
    cantidad: Decimal = Field(..., gt=0)


class PrestamoCreate(BaseModel):
    # Solicitante registrado o nombre libre (personal externo)
    id_empleado_solicitante: Optional[int] = None
    nombre_solicitante_manual: Optional[str] = None
    observaciones: Optional[str] = None
    detalles: List[DetallePrestamoCreate] = Field(..., min_length=1)


class DevolucionCreate(BaseModel):
    id_detalle_prestamo: int
    cantidad: Decimal = Field(..., gt=0)
    estado_devolucion: EstadoDevolucionEnum


class DetallePrestamo(BaseModel):
    id_detalle_prestamo: int
    tipo_item: TipoItemEnum
    id_item: int
    id_lote_origen: Optional[int] = None
    cantidad_prestada: Decimal
    cantidad_devuelta: Decimal
    estado_devolucion: Optional[EstadoDevolucionEnum] = None
    fecha_devolucion: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Prestamo(BaseModel):
    id_prestamo: int
    nombre_solicitante: str
    id_empleado_almacen: int
    observaciones: Optional[str] = None
    estado: EstadoPrestamoEnum
    fecha_prestamo: Optional[datetime] = None
    detalles: List[DetallePrestamo] = []

    model_config = ConfigDict(from_attributes=True)


class DevolucionRead(BaseModel):
    id_detalle_prestamo: int
    id_prestamo: int
    cantidad_devuelta: Decimal
    pendiente: Decimal
    id_lote_reingreso: Optional[int] = None
    estado_prestamo: EstadoPrestamoEnum


class PrestamoActivo(BaseModel):
    """Una línea con cantidad pendiente de un préstamo ACTIVO."""
    id_prestamo: int
    id_detalle_prestamo: int
    fecha_prestamo: Optional[datetime] = None
    solicitante: str
    tipo_item: TipoItemEnum
    id_item: int
    nombre_item: str
    cantidad_prestada: Decimal
    cantidad_devuelta: Decimal
    pendiente: Decimal
