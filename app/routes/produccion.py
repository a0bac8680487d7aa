# backEnd/app/routes/produccion.py

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.produccion import OrdenProduccionCreate, OrdenProduccionResultado
from ..services import produccion as produccion_service
from ..services.audit_service import AuditService
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/produccion",
    tags=["Producción"]
)


@router.post("/", response_model=OrdenProduccionResultado, status_code=status.HTTP_201_CREATED)
def create_orden_produccion(
    orden_data: OrdenProduccionCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ALMACEN_ROLES))
):
    """Consume los componentes de la receta (PEPS) y genera el lote del producto terminado."""
    try:
        resultado = produccion_service.producir(db, orden_data, current_user.id_empleado)
        db.commit()
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error en transacción de orden de producción: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al procesar la orden de producción.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "CREAR", "orden_produccion", resultado.id_orden,
        {
            "id_refaccion_producida": resultado.id_refaccion_producida,
            "cantidad_producida": resultado.cantidad_producida,
            "costo_unitario": resultado.costo_unitario,
        },
        request,
    ))
    return resultado
