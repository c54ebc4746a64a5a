# --------------------------------------------------------------
# File: keystore.py
# Description: Ciclo de vida de la clave simétrica persistida en disco.
# --------------------------------------------------------------
"""Carga, generación y persistencia de la única clave activa por ejecución."""

from __future__ import annotations

import logging
import os
import threading
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from sealbox.errors import KeyIOError, RandomSourceError
from sealbox.models import KEY_SIZE, SymmetricKey
from sealbox.storage import atomic_write_bytes, read_bytes

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]
RandomFn = Callable[[int], bytes]

REUSE_PROMPT = "Ya existe una clave. ¿Usarla? (s/n): "

_PATH_LOCKS: Dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: str) -> threading.Lock:
    """Devuelve el cerrojo compartido por todos los KeyStore de una ruta."""

    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(os.path.abspath(path), threading.Lock())


def _always_reuse(_prompt: str) -> bool:
    return True


class KeyStore:
    """Gestiona la clave de 256 bits almacenada en un fichero sin cabecera.

    Args:
        path (str): Ruta del fichero de clave (exactamente 32 bytes).
        confirm (Optional[ConfirmFn]): Capacidad inyectada que decide si se
            reutiliza una clave existente. Por defecto siempre la reutiliza.
        random_source (RandomFn): Fuente de bytes aleatorios seguros.

    """

    def __init__(
        self,
        path: str,
        confirm: Optional[ConfirmFn] = None,
        random_source: RandomFn = os.urandom,
    ) -> None:
        self.path = path
        self._confirm = confirm or _always_reuse
        self._random_source = random_source
        self._lock = _lock_for(path)

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> SymmetricKey:
        """Lee la clave almacenada.

        Raises:
            KeyIOError: Si el fichero no puede leerse o no mide 32 bytes.

        """

        try:
            material = read_bytes(self.path)
        except OSError as exc:
            raise KeyIOError(f"No se pudo leer la clave en {self.path}.") from exc
        try:
            key = SymmetricKey(material=material)
        except ValidationError as exc:
            raise KeyIOError(
                f"El fichero de clave {self.path} no contiene {KEY_SIZE} bytes."
            ) from exc
        logger.debug("Clave cargada desde %s", self.path)
        return key

    def generate(self) -> SymmetricKey:
        """Genera una clave nueva y la persiste de forma atómica.

        Sobrescribe cualquier clave previa: los sobres sellados con ella dejan
        de poder abrirse.

        Raises:
            RandomSourceError: Si no hay aleatoriedad segura disponible.
            KeyIOError: Si la clave no puede persistirse.

        """

        try:
            material = self._random_source(KEY_SIZE)
        except (OSError, NotImplementedError) as exc:
            raise RandomSourceError() from exc
        key = SymmetricKey(material=material)
        try:
            atomic_write_bytes(self.path, key.material, mode=0o600)
        except OSError as exc:
            raise KeyIOError(f"No se pudo guardar la clave en {self.path}.") from exc
        logger.info("Nueva clave AES-256 guardada en %s", self.path)
        return key

    def obtain(self) -> SymmetricKey:
        """Carga la clave existente o genera una nueva según el operador.

        Returns:
            SymmetricKey: Clave activa para esta ejecución.

        """

        with self._lock:
            if not self.exists():
                return self.generate()
            if self._confirm(REUSE_PROMPT):
                return self.load()
            logger.warning(
                "Se sobrescribe la clave de %s: los sobres sellados con la "
                "clave anterior ya no podrán descifrarse.",
                self.path,
            )
            return self.generate()
