# backEnd/app/routes/prestamos.py

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.prestamo import PrestamoCreate, Prestamo, DevolucionCreate, DevolucionRead, PrestamoActivo
from ..services import prestamos as prestamo_service
from ..services.audit_service import AuditService
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/prestamos",
    tags=["Préstamos"]
)


@router.post("/", response_model=Prestamo, status_code=status.HTTP_201_CREATED)
def create_prestamo(
    prestamo_data: PrestamoCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ALMACEN_ROLES))
):
    """Registra un préstamo; el inventario sale en este momento."""
    try:
        db_prestamo = prestamo_service.crear_prestamo(db, prestamo_data, current_user.id_empleado)
        db.commit()
        db_prestamo = prestamo_service.obtener_prestamo(db, db_prestamo.id_prestamo)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al registrar préstamo: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al registrar el préstamo.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "CREAR", "prestamos", db_prestamo.id_prestamo,
        prestamo_data.model_dump(), request,
    ))
    return db_prestamo


@router.put("/devolucion", response_model=DevolucionRead)
def registrar_devolucion(
    devolucion: DevolucionCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ALMACEN_ROLES))
):
    """
    Registra la devolución (parcial o total) de una línea de préstamo.
    Solo lo devuelto en estado BUENO regresa al inventario.
    """
    try:
        resultado = prestamo_service.registrar_devolucion(
            db, devolucion.id_detalle_prestamo, devolucion.cantidad, devolucion.estado_devolucion
        )
        db.commit()
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al registrar devolución: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al registrar devolución.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "DEVOLVER", "detalle_prestamo", devolucion.id_detalle_prestamo,
        {**devolucion.model_dump(), "estado_prestamo": resultado.estado_prestamo}, request,
    ))
    return resultado


@router.get("/activos", response_model=List[PrestamoActivo])
def read_prestamos_activos(
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    """Líneas con saldo pendiente de préstamos activos (tablero del almacén)."""
    return prestamo_service.listar_activos(db)


@router.get("/{id_prestamo}", response_model=Prestamo)
def read_prestamo(
    id_prestamo: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    try:
        return prestamo_service.obtener_prestamo(db, id_prestamo)
    except InventarioError as e:
        raise a_http(e)
