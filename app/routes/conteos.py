# backEnd/app/routes/conteos.py

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..models.enums import EstadoConteoEnum
from ..schemas.conteo import ConteoCreate, Conteo, ConteoPagination
from ..services import conteos as conteo_service
from ..services.audit_service import AuditService
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/conteos",
    tags=["Conteos de Inventario"]
)


@router.post("/", response_model=Conteo, status_code=status.HTTP_201_CREATED)
def create_conteo(
    conteo_data: ConteoCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    try:
        db_conteo = conteo_service.crear_conteo(db, conteo_data)
        db.commit()
        db.refresh(db_conteo)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al crear conteo: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error en el servidor al crear el conteo.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "CREAR", "conteo_inventario", db_conteo.id_conteo, conteo_data.model_dump(), request,
    ))
    return db_conteo


@router.put("/{id_conteo}", response_model=Conteo)
def update_conteo(
    id_conteo: int,
    conteo_data: ConteoCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    try:
        db_conteo = conteo_service.actualizar_conteo(db, id_conteo, conteo_data)
        db.commit()
        db.refresh(db_conteo)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al actualizar conteo {id_conteo}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error en el servidor al actualizar el conteo.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "ACTUALIZAR", "conteo_inventario", id_conteo, conteo_data.model_dump(), request,
    ))
    return db_conteo


@router.post("/{id_conteo}/aplicar", response_model=Conteo)
def aplicar_conteo(
    id_conteo: int,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    """Aplica un conteo COMPLETADO al inventario. Un conteo APLICADO no se vuelve a aplicar."""
    try:
        db_conteo = conteo_service.aplicar_conteo(db, id_conteo)
        db.commit()
        db.refresh(db_conteo)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al aplicar conteo {id_conteo}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error en el servidor al aplicar el conteo.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "APLICAR", "conteo_inventario", id_conteo,
        {"insumos_actualizados": len(db_conteo.detalles_insumo)}, request,
    ))
    return db_conteo


@router.get("/", response_model=ConteoPagination)
def read_conteos(
    skip: int = Query(0, ge=0),
    limit: int = Query(15, ge=1, le=100),
    search: Optional[str] = Query(None, description="Buscar por empleado u observaciones"),
    estado: Optional[EstadoConteoEnum] = Query(None),
    fecha_desde: Optional[datetime] = Query(None),
    fecha_hasta: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    items, total = conteo_service.listar_conteos(db, skip, limit, search, estado, fecha_desde, fecha_hasta)
    return {"items": items, "total": total}


@router.get("/{id_conteo}", response_model=Conteo)
def read_conteo(
    id_conteo: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    try:
        return conteo_service.obtener_conteo(db, id_conteo)
    except InventarioError as e:
        raise a_http(e)
