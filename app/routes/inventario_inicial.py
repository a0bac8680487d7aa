# backEnd/app/routes/inventario_inicial.py

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.conteo import InventarioInicialCreate, Conteo
from ..services import conteos as conteo_service
from ..services.audit_service import AuditService
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/inventario-inicial",
    tags=["Inventario Inicial"]
)


@router.post("/", response_model=Conteo, status_code=status.HTTP_201_CREATED)
def cargar_inventario_inicial(
    carga: InventarioInicialCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.require_roles(auth_utils.ADMIN_ROLES))
):
    """
    Registra el inventario inicial como un conteo ya aplicado: las refacciones
    generan su lote inicial y los insumos quedan con la existencia capturada.
    """
    try:
        db_conteo = conteo_service.cargar_inventario_inicial(db, carga)
        db.commit()
        db.refresh(db_conteo)
    except InventarioError as e:
        db.rollback()
        raise a_http(e)
    except Exception as e:
        db.rollback()
        logger.error(f"Error en transacción de carga de inventario inicial: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error al procesar la carga de inventario.")

    background_tasks.add_task(AuditService.registrar, AuditService.evento(
        current_user, "CREAR", "inventario_inicial", db_conteo.id_conteo,
        {
            "refacciones": len(carga.detalles_refacciones),
            "insumos": len(carga.detalles_insumos),
            "motivo": carga.maestro.motivo,
        },
        request,
    ))
    return db_conteo
