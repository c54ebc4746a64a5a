# --------------------------------------------------------------
# File: storage.py
# Description: Persistencia atómica de ficheros binarios (clave y sobres).
# --------------------------------------------------------------
"""Funciones auxiliares de entrada/salida para el almacenamiento local."""

from __future__ import annotations

import logging
import os
import tempfile

__all__ = ["atomic_write_bytes", "read_bytes"]

logger = logging.getLogger(__name__)


def _ensure_parent_dir(path: str) -> str:
    """Garantiza que exista el directorio padre del archivo de destino."""

    parent = os.path.dirname(path) or "."
    os.makedirs(parent, exist_ok=True)
    return parent


def read_bytes(path: str) -> bytes:
    """Lee un archivo binario completo."""

    with open(path, "rb") as handler:
        return handler.read()


def atomic_write_bytes(path: str, data: bytes, mode: int = 0o600) -> None:
    """Guarda datos binarios aplicando escritura atómica.

    El contenido se escribe en un temporal del mismo directorio y después se
    renombra sobre el destino, de modo que una interrupción nunca deja el
    archivo a medio escribir.

    Args:
        path (str): Ruta del archivo de destino.
        data (bytes): Contenido que se persistirá.
        mode (int): Permisos finales del archivo.

    Raises:
        OSError: Si no puede escribirse o renombrarse el temporal.

    """

    parent = _ensure_parent_dir(path)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", dir=parent)
    try:
        with os.fdopen(fd, "wb") as handler:
            handler.write(data)
            handler.flush()
            os.fsync(handler.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug("Escritura atómica de %d bytes en %s", len(data), path)
