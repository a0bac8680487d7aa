# backEnd/app/services/salidas.py

import logging
from decimal import Decimal

from sqlalchemy.orm import Session, joinedload

from ..models.salida import (
    SalidaAlmacen as DBSalida,
    DetalleSalida as DBDetalleSalida,
    DetalleSalidaInsumo as DBDetalleSalidaInsumo,
)
from ..models.empleado import Empleado as DBEmpleado
from ..schemas.salida import SalidaCreate, Salida
from . import lotes as lote_service
from . import valuacion_insumo
from .errores import NoEncontrado, ErrorValidacion

logger = logging.getLogger(__name__)


def crear_salida(db: Session, datos: SalidaCreate) -> DBSalida:
    """
    Despacho de almacén. Cada lote tocado queda como una línea de detalle_salida
    con el costo del lote en ese momento; los insumos guardan el promedio vigente.
    """
    if not datos.detalles_refaccion and not datos.detalles_insumo:
        raise ErrorValidacion("La salida debe tener al menos una línea de refacción o de insumo.")
    if not db.query(DBEmpleado).filter(DBEmpleado.id_empleado == datos.solicitado_por_id).first():
        raise NoEncontrado(f"El empleado con ID {datos.solicitado_por_id} no fue encontrado.")

    salida = DBSalida(
        tipo_salida=datos.tipo_salida,
        id_autobus=datos.id_autobus,
        kilometraje_autobus=datos.kilometraje_autobus,
        solicitado_por_id=datos.solicitado_por_id,
        observaciones=datos.observaciones,
    )
    if datos.fecha_operacion:
        salida.fecha_operacion = datos.fecha_operacion
    db.add(salida)
    db.flush()

    for linea in datos.detalles_refaccion:
        if linea.id_lote:
            consumos = [lote_service.descontar_lote(db, linea.id_lote, linea.cantidad, id_refaccion=linea.id_refaccion)]
        else:
            consumos = lote_service.descontar_peps(db, linea.id_refaccion, linea.cantidad)
        for consumo in consumos:
            salida.detalles_refaccion.append(DBDetalleSalida(
                id_refaccion=linea.id_refaccion,
                id_lote=consumo.id_lote,
                cantidad_despachada=consumo.cantidad,
                costo_unitario=consumo.costo_unitario,
            ))

    for linea in datos.detalles_insumo:
        costo_al_momento = valuacion_insumo.despachar_insumo(db, linea.id_insumo, linea.cantidad_usada)
        salida.detalles_insumo.append(DBDetalleSalidaInsumo(
            id_insumo=linea.id_insumo,
            cantidad_usada=linea.cantidad_usada,
            costo_al_momento=costo_al_momento,
        ))

    db.flush()
    logger.info(
        f"Salida {salida.id_salida} registrada: {len(salida.detalles_refaccion)} líneas de lote, "
        f"{len(salida.detalles_insumo)} insumos"
    )
    return salida


def costo_total_salida(salida: DBSalida) -> Decimal:
    total = Decimal(0)
    for d in salida.detalles_refaccion:
        total += Decimal(str(d.cantidad_despachada)) * Decimal(str(d.costo_unitario))
    for d in salida.detalles_insumo:
        total += Decimal(str(d.cantidad_usada)) * Decimal(str(d.costo_al_momento))
    return total


def obtener_salida(db: Session, id_salida: int) -> Salida:
    salida = db.query(DBSalida).options(
        joinedload(DBSalida.detalles_refaccion),
        joinedload(DBSalida.detalles_insumo),
    ).filter(DBSalida.id_salida == id_salida).first()
    if salida is None:
        raise NoEncontrado(f"No se encontró una salida con el ID {id_salida}")

    respuesta = Salida.model_validate(salida)
    respuesta.costo_total = costo_total_salida(salida)
    return respuesta
