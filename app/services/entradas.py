# backEnd/app/services/entradas.py

import logging
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ..models.entrada import (
    EntradaAlmacen as DBEntrada,
    DetalleEntrada as DBDetalleEntrada,
    DetalleEntradaInsumo as DBDetalleEntradaInsumo,
)
from ..models.empleado import Empleado as DBEmpleado
from ..models.proveedor import Proveedor as DBProveedor
from ..models.enums import TipoItemEnum
from ..schemas.entrada import EntradaCreate, EntradaResumen, EntradaDetalle, LineaEntradaRead
from . import lotes as lote_service
from . import valuacion_insumo
from .errores import NoEncontrado, ErrorValidacion

logger = logging.getLogger(__name__)


def _validar_fecha_operacion(fecha: datetime) -> None:
    ahora = datetime.now(timezone.utc) if fecha.tzinfo else datetime.now()
    if fecha > ahora:
        raise ErrorValidacion("La fecha de operación no puede ser una fecha futura.")


def crear_entrada(db: Session, datos: EntradaCreate) -> DBEntrada:
    """
    Registra una entrada de almacén completa en una sola transacción:
    cada línea de refacción genera su lote y cada línea de insumo
    recalcula el costo promedio ponderado.
    """
    _validar_fecha_operacion(datos.fecha_operacion)
    if not datos.detalles_refaccion and not datos.detalles_insumo:
        raise ErrorValidacion("La entrada debe tener al menos una línea de refacción o de insumo.")

    if not db.query(DBEmpleado).filter(DBEmpleado.id_empleado == datos.recibido_por_id).first():
        raise NoEncontrado(f"El empleado con ID {datos.recibido_por_id} no fue encontrado.")
    if datos.id_proveedor and not db.query(DBProveedor).filter(DBProveedor.id_proveedor == datos.id_proveedor).first():
        raise NoEncontrado(f"El proveedor con ID {datos.id_proveedor} no fue encontrado.")

    entrada = DBEntrada(
        id_proveedor=datos.id_proveedor,
        factura_proveedor=datos.factura_proveedor,
        vale_interno=datos.vale_interno,
        recibido_por_id=datos.recibido_por_id,
        razon_social=datos.razon_social,
        observaciones=datos.observaciones,
        fecha_operacion=datos.fecha_operacion,
    )
    db.add(entrada)
    db.flush()

    for linea in datos.detalles_refaccion:
        costo = valuacion_insumo.calcular_costo_unitario(
            linea.cantidad_recibida, linea.costo_ingresado, linea.tipo_costo, linea.aplica_iva
        )
        detalle = DBDetalleEntrada(
            id_entrada=entrada.id_entrada,
            id_refaccion=linea.id_refaccion,
            cantidad_recibida=linea.cantidad_recibida,
            costo_unitario_subtotal=costo.subtotal,
            monto_iva_unitario=costo.iva,
            costo_unitario_final=costo.final,
        )
        db.add(detalle)
        db.flush()
        lote_service.crear_lote(
            db,
            linea.id_refaccion,
            linea.cantidad_recibida,
            costo.final,
            costo_unitario_subtotal=costo.subtotal,
            monto_iva_unitario=costo.iva,
            id_detalle_entrada=detalle.id_detalle_entrada,
        )

    for linea in datos.detalles_insumo:
        costo = valuacion_insumo.calcular_costo_unitario(
            linea.cantidad_recibida, linea.costo_ingresado, linea.tipo_costo, linea.aplica_iva
        )
        valuacion_insumo.recibir_insumo(db, linea.id_insumo, linea.cantidad_recibida, costo.final)
        db.add(DBDetalleEntradaInsumo(
            id_entrada=entrada.id_entrada,
            id_insumo=linea.id_insumo,
            cantidad_recibida=linea.cantidad_recibida,
            costo_unitario_subtotal=costo.subtotal,
            monto_iva_unitario=costo.iva,
            costo_unitario_final=costo.final,
        ))

    db.flush()
    logger.info(
        f"Entrada {entrada.id_entrada} registrada: {len(datos.detalles_refaccion)} refacciones, "
        f"{len(datos.detalles_insumo)} insumos"
    )
    return entrada


def _lineas_entrada(entrada: DBEntrada) -> List[LineaEntradaRead]:
    lineas = []
    for d in entrada.detalles_refaccion:
        # El valor de la línea sigue al lote, que puede haberse revalorizado
        costo_final = d.lote.costo_unitario_final if d.lote is not None else d.costo_unitario_final
        lineas.append(LineaEntradaRead(
            tipo_item=TipoItemEnum.refaccion,
            id_item=d.id_refaccion,
            nombre_item=d.refaccion.nombre if d.refaccion else "Desconocido",
            cantidad=d.cantidad_recibida,
            costo_unitario_subtotal=d.costo_unitario_subtotal,
            monto_iva_unitario=d.monto_iva_unitario,
            costo_unitario_final=costo_final,
            id_lote=d.lote.id_lote if d.lote is not None else None,
        ))
    for d in entrada.detalles_insumo:
        lineas.append(LineaEntradaRead(
            tipo_item=TipoItemEnum.insumo,
            id_item=d.id_insumo,
            nombre_item=d.insumo.nombre if d.insumo else "Desconocido",
            cantidad=d.cantidad_recibida,
            costo_unitario_subtotal=d.costo_unitario_subtotal,
            monto_iva_unitario=d.monto_iva_unitario,
            costo_unitario_final=d.costo_unitario_final,
        ))
    return lineas


def _valor_neto(lineas: List[LineaEntradaRead]) -> Decimal:
    return sum((Decimal(str(l.cantidad)) * Decimal(str(l.costo_unitario_final)) for l in lineas), Decimal(0))


def _resumen(entrada: DBEntrada, lineas: List[LineaEntradaRead]) -> dict:
    return dict(
        id_entrada=entrada.id_entrada,
        id_proveedor=entrada.id_proveedor,
        nombre_proveedor=entrada.proveedor.nombre_proveedor if entrada.proveedor else None,
        factura_proveedor=entrada.factura_proveedor,
        vale_interno=entrada.vale_interno,
        razon_social=entrada.razon_social,
        recibido_por_id=entrada.recibido_por_id,
        nombre_empleado=entrada.recibido_por.nombre if entrada.recibido_por else None,
        observaciones=entrada.observaciones,
        fecha_operacion=entrada.fecha_operacion,
        valor_neto=_valor_neto(lineas),
    )


def obtener_entrada(db: Session, id_entrada: int) -> EntradaDetalle:
    entrada = db.query(DBEntrada).options(
        joinedload(DBEntrada.detalles_refaccion).joinedload(DBDetalleEntrada.lote),
        joinedload(DBEntrada.detalles_insumo),
    ).filter(DBEntrada.id_entrada == id_entrada).first()
    if entrada is None:
        raise NoEncontrado(f"No se encontró una entrada con el ID {id_entrada}")
    lineas = _lineas_entrada(entrada)
    return EntradaDetalle(**_resumen(entrada, lineas), detalles=lineas)


def listar_entradas(
    db: Session,
    skip: int = 0,
    limit: int = 10,
    search: Optional[str] = None,
    fecha_inicio: Optional[datetime] = None,
    fecha_fin: Optional[datetime] = None,
) -> Tuple[List[EntradaResumen], int]:
    query = db.query(DBEntrada).outerjoin(
        DBProveedor, DBEntrada.id_proveedor == DBProveedor.id_proveedor
    ).outerjoin(DBEmpleado, DBEntrada.recibido_por_id == DBEmpleado.id_empleado)

    if search and search.strip():
        patron = f"%{search.strip()}%"
        query = query.filter(or_(
            DBProveedor.nombre_proveedor.ilike(patron),
            DBEntrada.factura_proveedor.ilike(patron),
            DBEmpleado.nombre.ilike(patron),
        ))
    if fecha_inicio:
        query = query.filter(DBEntrada.fecha_operacion >= fecha_inicio)
    if fecha_fin:
        query = query.filter(DBEntrada.fecha_operacion < fecha_fin + timedelta(days=1))

    total = query.count()
    entradas = query.order_by(DBEntrada.fecha_operacion.desc(), DBEntrada.id_entrada.desc()).offset(skip).limit(limit).all()

    items = []
    for entrada in entradas:
        items.append(EntradaResumen(**_resumen(entrada, _lineas_entrada(entrada))))
    return items, total
