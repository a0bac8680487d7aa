# backEnd/app/routes/insumos.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import auth as auth_utils
from ..database import get_db
from ..models.insumo import Insumo as DBInsumo
from ..schemas.inventario import InsumoRead

router = APIRouter(
    prefix="/insumos",
    tags=["Insumos"]
)


@router.get("/{id_insumo}", response_model=InsumoRead)
def read_insumo(
    id_insumo: int,
    db: Session = Depends(get_db),
    current_user = Depends(auth_utils.get_current_user)
):
    db_insumo = db.query(DBInsumo).filter(DBInsumo.id_insumo == id_insumo).first()
    if db_insumo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"El insumo con ID {id_insumo} no fue encontrado.")

    insumo = InsumoRead.model_validate(db_insumo)
    insumo.bajo_minimo = insumo.stock_actual < insumo.stock_minimo
    return insumo
