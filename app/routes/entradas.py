# backEnd/app/routes/entradas.py

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.entrada import EntradaCreate, EntradaDetalle, EntradaPagination
from ..services import entradas as entrada_service
from ..services.audit_service import AuditService
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/entradas",
    tags=["Entradas de Almacén"]
)


@router.post("/", response_model=EntradaDetalle, status_code=status.HTTP_201_CREATED)
def create_entrada(
    entrada_data: EntradaCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ALMACEN_ROLES))
):
    """Recibe mercancía: genera los lotes de refacciones y recalcula el promedio de los insumos."""
    try:
        db_entrada = entrada_service.crear_entrada(db, entrada_data)
        db.commit()
        entrada = entrada_service.obtener_entrada(db, db_entrada.id_entrada)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error inesperado al registrar entrada: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al registrar la entrada.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "CREAR", "entrada_almacen", entrada.id_entrada,
        {
            "factura": entrada_data.factura_proveedor,
            "proveedor": entrada_data.id_proveedor,
            "razon_social": entrada_data.razon_social,
            "valor_neto": entrada.valor_neto,
        },
        request,
    ))
    return entrada


@router.get("/", response_model=EntradaPagination)
def read_entradas(
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Proveedor, factura o empleado"),
    fecha_inicio: Optional[datetime] = Query(None),
    fecha_fin: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    items, total = entrada_service.listar_entradas(db, skip, limit, search, fecha_inicio, fecha_fin)
    return {"items": items, "total": total}


@router.get("/{id_entrada}", response_model=EntradaDetalle)
def read_entrada(
    id_entrada: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    try:
        return entrada_service.obtener_entrada(db, id_entrada)
    except InventarioError as e:
        raise a_http(e)
