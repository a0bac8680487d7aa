from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import os
import logging

# --- Carga de Variables de Entorno ---
load_dotenv()

# --- Logging ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

from app.models.base import Base
from app.database import engine
from app.routes import (
    auth, ajustes, prestamos, conteos, inventario_inicial, entradas,
    salidas, produccion, lotes, refacciones, insumos, audit_logs
)

# --- Creación de la Aplicación FastAPI ---
app = FastAPI(
    title="Sistema de Almacén y Flotilla",
    description="API de inventario: valuación de insumos, lotes PEPS de refacciones, ajustes, préstamos y conteos.",
    version="1.0.0"
)

# --- Middlewares ---
origenes = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origenes,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Creación de Tablas en la Base de Datos (para desarrollo) ---
Base.metadata.create_all(bind=engine)

# --- Inclusión de Routers ---
app.include_router(auth.router)
app.include_router(entradas.router)
app.include_router(salidas.router)
app.include_router(lotes.router)
app.include_router(refacciones.router)
app.include_router(insumos.router)
app.include_router(ajustes.router)
app.include_router(prestamos.router)
app.include_router(conteos.router)
app.include_router(inventario_inicial.router)
app.include_router(produccion.router)
app.include_router(audit_logs.router)


@app.get("/")
def read_root():
    return {"message": "API del almacén en funcionamiento"}
