# backEnd/app/services/prestamos.py

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session, joinedload

from ..models.prestamo import Prestamo as DBPrestamo, DetallePrestamo as DBDetallePrestamo
from ..models.empleado import Empleado as DBEmpleado
from ..models.enums import EstadoPrestamoEnum, EstadoDevolucionEnum
from ..schemas.prestamo import PrestamoCreate, DevolucionRead, PrestamoActivo
from .errores import NoEncontrado, ErrorValidacion, DevolucionExcedida
from .items import ItemRef, nombre_item, retirar_para_prestamo, reingresar_devolucion

logger = logging.getLogger(__name__)


def crear_prestamo(db: Session, datos: PrestamoCreate, id_empleado_almacen: int) -> DBPrestamo:
    """
    Registra un préstamo. El inventario sale al momento de prestar; las refacciones
    salen de un solo lote (el más antiguo que alcance).
    """
    if not datos.id_empleado_solicitante and not (datos.nombre_solicitante_manual or "").strip():
        raise ErrorValidacion("Faltan datos para generar el préstamo: indique el solicitante.")
    if not datos.detalles:
        raise ErrorValidacion("Faltan datos para generar el préstamo: no hay artículos.")

    if datos.id_empleado_solicitante:
        solicitante = db.query(DBEmpleado).filter(DBEmpleado.id_empleado == datos.id_empleado_solicitante).first()
        if not solicitante:
            raise NoEncontrado(f"El empleado con ID {datos.id_empleado_solicitante} no fue encontrado.")

    prestamo = DBPrestamo(
        nombre_solicitante_manual=datos.nombre_solicitante_manual,
        id_empleado_solicitante=datos.id_empleado_solicitante,
        id_empleado_almacen=id_empleado_almacen,
        observaciones=datos.observaciones,
        estado=EstadoPrestamoEnum.ACTIVO,
    )
    db.add(prestamo)
    db.flush()

    for linea in datos.detalles:
        item = ItemRef(linea.tipo_item, linea.id_item)
        id_lote = retirar_para_prestamo(db, item, linea.cantidad)
        prestamo.detalles.append(DBDetallePrestamo(
            tipo_item=linea.tipo_item,
            id_item=linea.id_item,
            id_lote_origen=id_lote,
            cantidad_prestada=linea.cantidad,
            cantidad_devuelta=Decimal(0),
        ))

    db.flush()
    logger.info(f"Préstamo {prestamo.id_prestamo} registrado con {len(datos.detalles)} artículos")
    return prestamo


def registrar_devolucion(
    db: Session,
    id_detalle_prestamo: int,
    cantidad: Decimal,
    estado_devolucion: EstadoDevolucionEnum,
) -> DevolucionRead:
    cantidad = Decimal(str(cantidad))
    if cantidad <= 0:
        raise ErrorValidacion("La cantidad devuelta debe ser mayor a cero.")

    detalle = db.query(DBDetallePrestamo).filter(
        DBDetallePrestamo.id_detalle_prestamo == id_detalle_prestamo
    ).with_for_update().populate_existing().first()
    if detalle is None:
        raise NoEncontrado("Detalle de préstamo no encontrado.")

    pendiente = Decimal(str(detalle.cantidad_prestada)) - Decimal(str(detalle.cantidad_devuelta))
    if cantidad > pendiente:
        logger.warning(f"Devolución rechazada en detalle {id_detalle_prestamo}: pendiente {pendiente}, devuelto {cantidad}")
        raise DevolucionExcedida(f"No puedes devolver más de lo pendiente ({pendiente}).")

    detalle.cantidad_devuelta = Decimal(str(detalle.cantidad_devuelta)) + cantidad
    detalle.estado_devolucion = estado_devolucion
    detalle.fecha_devolucion = datetime.now(timezone.utc)

    # Solo lo que vuelve en buen estado regresa al inventario; lo demás se da por consumido
    id_lote_reingreso = None
    if estado_devolucion == EstadoDevolucionEnum.BUENO:
        id_lote_reingreso = reingresar_devolucion(db, ItemRef(detalle.tipo_item, detalle.id_item), cantidad)
    db.flush()

    prestamo = db.query(DBPrestamo).filter(DBPrestamo.id_prestamo == detalle.id_prestamo).with_for_update().populate_existing().first()
    lineas_abiertas = db.query(DBDetallePrestamo).filter(
        DBDetallePrestamo.id_prestamo == detalle.id_prestamo,
        DBDetallePrestamo.cantidad_prestada > DBDetallePrestamo.cantidad_devuelta,
    ).count()
    if lineas_abiertas == 0:
        prestamo.estado = EstadoPrestamoEnum.CERRADO
        logger.info(f"Préstamo {prestamo.id_prestamo} cerrado: todas sus líneas fueron devueltas")
    db.flush()

    return DevolucionRead(
        id_detalle_prestamo=detalle.id_detalle_prestamo,
        id_prestamo=detalle.id_prestamo,
        cantidad_devuelta=detalle.cantidad_devuelta,
        pendiente=Decimal(str(detalle.cantidad_prestada)) - Decimal(str(detalle.cantidad_devuelta)),
        id_lote_reingreso=id_lote_reingreso,
        estado_prestamo=prestamo.estado,
    )


def obtener_prestamo(db: Session, id_prestamo: int) -> DBPrestamo:
    prestamo = db.query(DBPrestamo).options(
        joinedload(DBPrestamo.detalles),
        joinedload(DBPrestamo.solicitante),
    ).filter(DBPrestamo.id_prestamo == id_prestamo).first()
    if prestamo is None:
        raise NoEncontrado(f"No se encontró un préstamo con el ID {id_prestamo}")
    return prestamo


def listar_activos(db: Session) -> List[PrestamoActivo]:
    """Líneas con saldo pendiente de préstamos ACTIVO, los más recientes primero."""
    filas = db.query(DBDetallePrestamo, DBPrestamo).join(
        DBPrestamo, DBPrestamo.id_prestamo == DBDetallePrestamo.id_prestamo
    ).filter(
        DBPrestamo.estado == EstadoPrestamoEnum.ACTIVO,
        DBDetallePrestamo.cantidad_prestada > DBDetallePrestamo.cantidad_devuelta,
    ).order_by(DBPrestamo.fecha_prestamo.desc(), DBDetallePrestamo.id_detalle_prestamo.asc()).all()

    activos = []
    for detalle, prestamo in filas:
        activos.append(PrestamoActivo(
            id_prestamo=prestamo.id_prestamo,
            id_detalle_prestamo=detalle.id_detalle_prestamo,
            fecha_prestamo=prestamo.fecha_prestamo,
            solicitante=prestamo.nombre_solicitante,
            tipo_item=detalle.tipo_item,
            id_item=detalle.id_item,
            nombre_item=_nombre_o_desconocido(db, ItemRef(detalle.tipo_item, detalle.id_item)),
            cantidad_prestada=detalle.cantidad_prestada,
            cantidad_devuelta=detalle.cantidad_devuelta,
            pendiente=detalle.pendiente,
        ))
    return activos


def _nombre_o_desconocido(db: Session, item: ItemRef) -> str:
    try:
        return nombre_item(db, item)
    except NoEncontrado:
        return "Desconocido"
