# backEnd/app/routes/salidas.py

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.salida import SalidaCreate, Salida
from ..services import salidas as salida_service
from ..services.audit_service import AuditService
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/salidas",
    tags=["Salidas de Almacén"]
)


@router.post("/", response_model=Salida, status_code=status.HTTP_201_CREATED)
def create_salida(
    salida_data: SalidaCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ALMACEN_ROLES))
):
    try:
        db_salida = salida_service.crear_salida(db, salida_data)
        db.commit()
        salida = salida_service.obtener_salida(db, db_salida.id_salida)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al registrar salida: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al registrar la salida.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "CREAR", "salida_almacen", salida.id_salida,
        {
            "tipo_salida": salida.tipo_salida,
            "id_autobus": salida.id_autobus,
            "costo_total": salida.costo_total,
        },
        request,
    ))
    return salida


@router.get("/{id_salida}", response_model=Salida)
def read_salida(
    id_salida: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    try:
        return salida_service.obtener_salida(db, id_salida)
    except InventarioError as e:
        raise a_http(e)
