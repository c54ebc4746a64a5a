# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Primitivas AES-GCM para sellar y abrir datos comprimidos.
# --------------------------------------------------------------
"""Cifrado autenticado AES-256-GCM sobre la carga comprimida."""

import logging
import os
from typing import Callable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from sealbox.errors import AuthenticationError, RandomSourceError
from sealbox.models import NONCE_SIZE, Nonce, SymmetricKey

logger = logging.getLogger(__name__)


def generate_nonce(random_source: Callable[[int], bytes] = os.urandom) -> Nonce:
    """Genera un nonce nuevo de 96 bits con la fuente aleatoria segura.

    Args:
        random_source (Callable[[int], bytes]): Generador de bytes aleatorios.

    Returns:
        Nonce: Nonce de un único uso.

    Raises:
        RandomSourceError: Si la fuente aleatoria no está disponible.

    """

    try:
        return Nonce(value=random_source(NONCE_SIZE))
    except (OSError, NotImplementedError) as exc:
        raise RandomSourceError() from exc


def aes_gcm_seal(key: SymmetricKey, nonce: Nonce, plaintext: bytes) -> bytes:
    """Cifra datos con AES-GCM y devuelve el ciphertext con el tag al final.

    Args:
        key (SymmetricKey): Clave de 256 bits.
        nonce (Nonce): Nonce de 96 bits no reutilizado con esta clave.
        plaintext (bytes): Datos a cifrar.

    Returns:
        bytes: Ciphertext seguido del tag de 128 bits.

    """

    return AESGCM(key.material).encrypt(nonce.value, plaintext, None)


def aes_gcm_open(key: SymmetricKey, nonce: Nonce, ciphertext: bytes) -> bytes:
    """Verifica el tag y descifra datos sellados con `aes_gcm_seal`.

    Args:
        key (SymmetricKey): Clave usada al sellar.
        nonce (Nonce): Nonce usado al sellar.
        ciphertext (bytes): Ciphertext con el tag al final.

    Returns:
        bytes: Datos originales en claro.

    Raises:
        AuthenticationError: Si el tag no verifica.

    """

    try:
        return AESGCM(key.material).decrypt(nonce.value, ciphertext, None)
    except InvalidTag as exc:
        logger.debug("Tag AES-GCM inválido sobre %d bytes", len(ciphertext))
        raise AuthenticationError() from exc
