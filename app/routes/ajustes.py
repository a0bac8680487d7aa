# backEnd/app/routes/ajustes.py

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from .. import auth as auth_utils
from ..database import get_db
from ..models.ajuste import AjusteInventarioMaestro as DBAjuste, AjusteInventarioDetalle as DBAjusteDetalle
from ..models.enums import TipoAjusteEnum
from ..schemas.ajuste import AjusteCreate, Ajuste, AjusteResumen, AjustePagination
from ..services import ajustes as ajuste_service
from ..services.audit_service import AuditService
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/ajustes",
    tags=["Ajustes de Inventario"]
)


@router.post("/", response_model=Ajuste, status_code=status.HTTP_201_CREATED)
def create_ajuste(
    ajuste_data: AjusteCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    """Registra un ajuste y lo aplica al inventario en una sola transacción."""
    try:
        db_ajuste = ajuste_service.crear_ajuste(db, ajuste_data)
        db.commit()
        db.refresh(db_ajuste)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al crear ajuste: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error en el servidor al registrar el ajuste.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "CREAR", "ajuste_inventario", db_ajuste.id_ajuste,
        ajuste_data.model_dump(), request,
    ))
    return db_ajuste


@router.put("/{id_ajuste}", response_model=Ajuste)
def update_ajuste(
    id_ajuste: int,
    ajuste_data: AjusteCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    """
    Revierte todas las líneas originales del ajuste y aplica las nuevas.
    Si cualquier paso falla no cambia nada.
    """
    try:
        # El bloqueo va antes de la foto de auditoría: otro PUT pudo cambiar las líneas
        db_ajuste = ajuste_service.obtener_ajuste(db, id_ajuste, bloquear=True)
        valores_antes = {
            **AuditService.serialize_model(db_ajuste),
            "detalles": [AuditService.serialize_model(d) for d in db_ajuste.detalles],
        }
        db_ajuste = ajuste_service.actualizar_ajuste(db, id_ajuste, ajuste_data)
        db.commit()
        db.refresh(db_ajuste)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al actualizar ajuste {id_ajuste}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error en el servidor al actualizar el ajuste.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "ACTUALIZAR", "ajuste_inventario", id_ajuste,
        {"antes": valores_antes, "despues": ajuste_data.model_dump()}, request,
    ))
    return db_ajuste


@router.get("/", response_model=AjustePagination)
def read_ajustes(
    skip: int = Query(0, ge=0),
    limit: int = Query(15, ge=1, le=100),
    tipo_ajuste: Optional[TipoAjusteEnum] = Query(None, description="Filtrar por tipo de ajuste"),
    search: Optional[str] = Query(None, description="Buscar en el motivo"),
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    query = db.query(DBAjuste).options(joinedload(DBAjuste.empleado))
    if tipo_ajuste:
        query = query.filter(DBAjuste.tipo_ajuste == tipo_ajuste)
    if search and search.strip():
        query = query.filter(DBAjuste.motivo.ilike(f"%{search.strip()}%"))

    total = query.count()
    ajustes = query.order_by(DBAjuste.fecha_ajuste.desc(), DBAjuste.id_ajuste.desc()).offset(skip).limit(limit).all()

    lineas = dict(
        db.query(DBAjusteDetalle.id_ajuste, func.count(DBAjusteDetalle.id_detalle))
        .filter(DBAjusteDetalle.id_ajuste.in_([a.id_ajuste for a in ajustes]))
        .group_by(DBAjusteDetalle.id_ajuste)
        .all()
    )
    items = [
        AjusteResumen(
            id_ajuste=a.id_ajuste,
            tipo_ajuste=a.tipo_ajuste,
            motivo=a.motivo,
            fecha_ajuste=a.fecha_ajuste,
            nombre_empleado=a.empleado.nombre if a.empleado else None,
            total_lineas=lineas.get(a.id_ajuste, 0),
        )
        for a in ajustes
    ]
    return {"items": items, "total": total}


@router.get("/{id_ajuste}", response_model=Ajuste)
def read_ajuste(
    id_ajuste: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    try:
        return ajuste_service.obtener_ajuste(db, id_ajuste)
    except InventarioError as e:
        raise a_http(e)
