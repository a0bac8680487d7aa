import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, List

from dotenv import load_dotenv
from sqlalchemy.orm import Session, joinedload

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from .database import get_db
from .models.empleado import Empleado
from .models.sesion import SesionActiva
from .models.enums import EstadoCuentaEnum, EstadoSesionEnum
from .schemas.token import TokenData

load_dotenv()

logger = logging.getLogger(__name__)

# Configuración de seguridad
# Asegúrate de que estas variables de entorno estén configuradas en tu archivo .env
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256") # Default a HS256 si no está en .env
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 480)) # Un turno de almacén

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2 Bearer token (para proteger rutas)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login") # 'auth/login' es la ruta del endpoint de login

# Funciones de hashing y verificación de contraseñas
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica si una contraseña plana coincide con un hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Genera el hash de una contraseña plana."""
    return pwd_context.hash(password)

# Funciones para crear y manejar tokens JWT
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Crea un token de acceso JWT. Devuelve (token, expiración)."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt, expire

# --- DEPENDENCIAS DE USUARIO Y ROL ---

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Empleado:
    """
    Obtiene el empleado autenticado a partir del token JWT.
    Además del JWT, el token debe seguir activo en sesiones_activas (logout lo revoca).
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudieron validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
        token_data = TokenData(username=username, id_usuario=payload.get("id"))
    except JWTError:
        raise credentials_exception

    sesion = db.query(SesionActiva).filter(
        SesionActiva.token_jwt == token,
        SesionActiva.estado == EstadoSesionEnum.activo,
    ).first()
    if sesion is None:
        logger.warning(f"Token de '{token_data.username}' sin sesión activa")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sesión inválida o cerrada. Inicie sesión nuevamente.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.query(Empleado).options(joinedload(Empleado.rol)).filter(
        Empleado.nombre_usuario == token_data.username
    ).first()
    if user is None:
        raise credentials_exception
    if user.estado_cuenta != EstadoCuentaEnum.activo:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="La cuenta está inactiva.")

    return user

def require_roles(required_roles: List[str]):
    """
    Dependencia que verifica que el empleado autenticado tenga alguno de los roles requeridos.
    """
    def _require_roles_inner(current_user: Empleado = Depends(get_current_user)):
        if current_user.nombre_rol not in required_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tienes permisos suficientes para acceder a este recurso."
            )
        return current_user
    return _require_roles_inner

# Roles del sistema
ROLES = ["Admin", "Almacenista", "SuperUsuario"]
ADMIN_ROLES = ["Admin", "SuperUsuario"] # Ajustes, conteos, inventario inicial
ALMACEN_ROLES = ["Admin", "Almacenista", "SuperUsuario"] # Entradas, salidas, préstamos, producción
