# backEnd/app/services/conteos.py

import logging
from datetime import datetime, timezone, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import or_, func
from sqlalchemy.orm import Session, selectinload

from ..models.conteo import (
    ConteoInventarioMaestro as DBConteo,
    ConteoInventarioDetalle as DBConteoDetalleRefaccion,
    ConteoInventarioDetalleInsumo as DBConteoDetalleInsumo,
)
from ..models.empleado import Empleado as DBEmpleado
from ..models.insumo import Insumo as DBInsumo
from ..models.enums import EstadoConteoEnum, TRANSICIONES_CONTEO
from ..schemas.conteo import ConteoCreate, ConteoResumen, InventarioInicialCreate
from . import lotes as lote_service
from . import valuacion_insumo
from .errores import NoEncontrado, ErrorValidacion, EstadoInvalido

logger = logging.getLogger(__name__)


def _validar_empleado(db: Session, id_empleado: int) -> None:
    if not db.query(DBEmpleado).filter(DBEmpleado.id_empleado == id_empleado).first():
        raise NoEncontrado(f"El empleado con ID {id_empleado} no fue encontrado.")


def _validar_insumos(db: Session, ids: List[int]) -> None:
    existentes = {fila[0] for fila in db.query(DBInsumo.id_insumo).filter(DBInsumo.id_insumo.in_(ids)).all()}
    faltantes = sorted(set(ids) - existentes)
    if faltantes:
        raise NoEncontrado(f"Insumos no encontrados: {faltantes}")


def _asignar_detalles(db: Session, conteo: DBConteo, datos: ConteoCreate) -> None:
    _validar_insumos(db, [d.id_insumo for d in datos.detalles])
    for detalle in datos.detalles:
        conteo.detalles_insumo.append(DBConteoDetalleInsumo(
            id_insumo=detalle.id_insumo,
            cantidad_contada=detalle.cantidad_contada,
            costo_unitario_asignado=detalle.costo_unitario_asignado,
        ))


def crear_conteo(db: Session, datos: ConteoCreate) -> DBConteo:
    if datos.maestro.estado == EstadoConteoEnum.APLICADO:
        raise ErrorValidacion("Un conteo nuevo solo puede quedar EN_PROCESO o COMPLETADO.")
    if not datos.detalles:
        raise ErrorValidacion("El conteo debe tener al menos un detalle.")
    _validar_empleado(db, datos.maestro.id_empleado)

    conteo = DBConteo(
        id_empleado=datos.maestro.id_empleado,
        observaciones=datos.maestro.observaciones,
        estado=datos.maestro.estado,
    )
    if datos.maestro.fecha_conteo:
        conteo.fecha_conteo = datos.maestro.fecha_conteo
    db.add(conteo)
    _asignar_detalles(db, conteo, datos)
    db.flush()

    logger.info(f"Conteo {conteo.id_conteo} creado en estado {conteo.estado.value} con {len(datos.detalles)} insumos")
    return conteo


def obtener_conteo(db: Session, id_conteo: int, bloquear: bool = False) -> DBConteo:
    query = db.query(DBConteo).filter(DBConteo.id_conteo == id_conteo)
    if bloquear:
        query = query.options(selectinload(DBConteo.detalles_insumo)).with_for_update().populate_existing()
    conteo = query.first()
    if conteo is None:
        raise NoEncontrado("Conteo no encontrado.")
    return conteo


def actualizar_conteo(db: Session, id_conteo: int, datos: ConteoCreate) -> DBConteo:
    """Reemplaza maestro y detalles. Un conteo APLICADO ya no se toca."""
    conteo = obtener_conteo(db, id_conteo, bloquear=True)

    if conteo.estado == EstadoConteoEnum.APLICADO:
        raise EstadoInvalido("Este conteo ya fue aplicado; no se puede modificar.")
    nuevo_estado = datos.maestro.estado
    if nuevo_estado == EstadoConteoEnum.APLICADO or nuevo_estado not in TRANSICIONES_CONTEO[conteo.estado]:
        raise ErrorValidacion(
            f"Estado '{nuevo_estado.value}' no permitido al editar. Use EN_PROCESO o COMPLETADO; "
            "para aplicar use /aplicar."
        )
    if not datos.detalles:
        raise ErrorValidacion("El conteo debe tener al menos un detalle.")
    _validar_empleado(db, datos.maestro.id_empleado)

    conteo.id_empleado = datos.maestro.id_empleado
    conteo.observaciones = datos.maestro.observaciones
    conteo.estado = nuevo_estado
    if datos.maestro.fecha_conteo:
        conteo.fecha_conteo = datos.maestro.fecha_conteo

    conteo.detalles_insumo.clear()
    db.flush()
    _asignar_detalles(db, conteo, datos)
    db.flush()

    logger.info(f"Conteo {id_conteo} actualizado ({nuevo_estado.value}, {len(datos.detalles)} insumos)")
    return conteo


def aplicar_conteo(db: Session, id_conteo: int) -> DBConteo:
    """
    Aplica un conteo COMPLETADO: cada insumo contado queda con la existencia y el
    costo del conteo (reinicio, no delta). El maestro se bloquea antes de revisar
    su estado, así dos aplicaciones simultáneas no pueden pasar las dos.
    """
    conteo = obtener_conteo(db, id_conteo, bloquear=True)

    if conteo.estado == EstadoConteoEnum.APLICADO:
        logger.warning(f"Intento de re-aplicar el conteo {id_conteo}")
        raise EstadoInvalido("Este conteo ya fue aplicado anteriormente.")
    if conteo.estado != EstadoConteoEnum.COMPLETADO:
        raise EstadoInvalido(
            f"Solo se pueden aplicar conteos en estado 'COMPLETADO'. Estado actual: {conteo.estado.value}"
        )
    if not conteo.detalles_insumo:
        raise ErrorValidacion("Este conteo no tiene detalles para aplicar.")

    for detalle in conteo.detalles_insumo:
        valuacion_insumo.fijar_existencia_insumo(
            db, detalle.id_insumo, detalle.cantidad_contada, detalle.costo_unitario_asignado
        )

    conteo.estado = EstadoConteoEnum.APLICADO
    conteo.fecha_aplicacion = datetime.now(timezone.utc)
    db.flush()

    logger.info(f"Conteo {id_conteo} aplicado: {len(conteo.detalles_insumo)} insumos actualizados")
    return conteo


def listar_conteos(
    db: Session,
    skip: int = 0,
    limit: int = 15,
    search: Optional[str] = None,
    estado: Optional[EstadoConteoEnum] = None,
    fecha_desde: Optional[datetime] = None,
    fecha_hasta: Optional[datetime] = None,
) -> Tuple[List[ConteoResumen], int]:
    query = db.query(DBConteo).outerjoin(DBEmpleado, DBConteo.id_empleado == DBEmpleado.id_empleado)

    if search and search.strip():
        patron = f"%{search.strip()}%"
        query = query.filter(or_(DBEmpleado.nombre.ilike(patron), DBConteo.observaciones.ilike(patron)))
    if estado:
        query = query.filter(DBConteo.estado == estado)
    if fecha_desde:
        query = query.filter(DBConteo.fecha_conteo >= fecha_desde)
    if fecha_hasta:
        # Incluye todo el día final
        query = query.filter(DBConteo.fecha_conteo < fecha_hasta + timedelta(days=1))

    total = query.count()
    conteos = query.order_by(DBConteo.fecha_conteo.desc(), DBConteo.id_conteo.desc()).offset(skip).limit(limit).all()

    totales = dict(
        db.query(DBConteoDetalleInsumo.id_conteo, func.count(DBConteoDetalleInsumo.id_detalle))
        .filter(DBConteoDetalleInsumo.id_conteo.in_([c.id_conteo for c in conteos]))
        .group_by(DBConteoDetalleInsumo.id_conteo)
        .all()
    )
    items = [
        ConteoResumen(
            id_conteo=c.id_conteo,
            fecha_conteo=c.fecha_conteo,
            observaciones=c.observaciones,
            estado=c.estado,
            nombre_empleado=c.empleado.nombre if c.empleado else None,
            total_detalles=totales.get(c.id_conteo, 0),
        )
        for c in conteos
    ]
    return items, total


def cargar_inventario_inicial(db: Session, datos: InventarioInicialCreate) -> DBConteo:
    """
    Carga inicial: se registra como un conteo ya APLICADO. Las refacciones generan un
    lote inicial (costo sin IVA); los insumos quedan con la existencia y costo capturados.
    """
    if not datos.detalles_refacciones and not datos.detalles_insumos:
        raise ErrorValidacion("Faltan detalles de refacciones o insumos para el inventario inicial.")
    _validar_empleado(db, datos.maestro.id_empleado)

    conteo = DBConteo(
        id_empleado=datos.maestro.id_empleado,
        fecha_conteo=datos.maestro.fecha_conteo,
        observaciones=datos.maestro.motivo,
        estado=EstadoConteoEnum.APLICADO,
        fecha_aplicacion=datetime.now(timezone.utc),
    )
    db.add(conteo)
    db.flush()

    for detalle in datos.detalles_refacciones:
        lote = lote_service.crear_lote(
            db,
            detalle.id_refaccion,
            detalle.cantidad,
            detalle.costo,
            costo_unitario_subtotal=detalle.costo,
        )
        conteo.detalles_refaccion.append(DBConteoDetalleRefaccion(
            id_refaccion=detalle.id_refaccion,
            id_lote=lote.id_lote,
            cantidad_contada=detalle.cantidad,
            costo_unitario_asignado=detalle.costo,
        ))

    for detalle in datos.detalles_insumos:
        valuacion_insumo.fijar_existencia_insumo(db, detalle.id_insumo, detalle.cantidad, detalle.costo)
        conteo.detalles_insumo.append(DBConteoDetalleInsumo(
            id_insumo=detalle.id_insumo,
            cantidad_contada=detalle.cantidad,
            costo_unitario_asignado=detalle.costo,
        ))

    db.flush()
    logger.info(
        f"Inventario inicial {conteo.id_conteo}: {len(datos.detalles_refacciones)} refacciones, "
        f"{len(datos.detalles_insumos)} insumos"
    )
    return conteo
