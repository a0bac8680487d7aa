# backEnd/app/routes/lotes.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..schemas.inventario import LoteRead
from ..services import lotes as lote_service
from ..services.errores import InventarioError
from ..utils.errores_http import a_http

router = APIRouter(
    prefix="/lotes",
    tags=["Lotes"]
)


@router.get("/{id_refaccion}", response_model=List[LoteRead])
def read_lotes_disponibles(
    id_refaccion: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    """Lotes con existencia de una refacción, en orden PEPS (el primero es el próximo en salir)."""
    try:
        lote_service.obtener_refaccion(db, id_refaccion)
    except InventarioError as e:
        raise a_http(e)
    return lote_service.lotes_disponibles(db, id_refaccion)
