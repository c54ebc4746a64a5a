# --------------------------------------------------------------
# File: pipeline.py
# Description: Orquestación compresión -> AES-GCM y formato del sobre.
# --------------------------------------------------------------
"""Pipeline de sellado y apertura de sobres.

Un sobre es ``nonce (12 bytes) || ciphertext || tag (16 bytes)``. Al sellar se
comprime antes de cifrar; al abrir se verifica y descifra antes de
descomprimir, y un fallo de autenticación aborta sin tocar el descompresor.
"""

from __future__ import annotations

import logging
from typing import Optional

from sealbox.compression import compress, decompress
from sealbox.crypto_sym import aes_gcm_open, aes_gcm_seal, generate_nonce
from sealbox.errors import EnvelopeFormatError
from sealbox.keystore import KeyStore
from sealbox.models import (
    NONCE_SIZE,
    TAG_SIZE,
    Direction,
    Nonce,
    PipelineConfig,
    PipelineResult,
    SymmetricKey,
)
from sealbox.text_encoding import decode_text, encode_text

logger = logging.getLogger(__name__)


def encode_envelope(
    key: SymmetricKey, plaintext: bytes, *, nonce: Optional[Nonce] = None
) -> bytes:
    """Comprime y sella datos en un sobre binario.

    Args:
        key (SymmetricKey): Clave activa.
        plaintext (bytes): Datos originales del operador.
        nonce (Optional[Nonce]): Nonce fijo, solo para vectores de prueba.
            Si se omite se genera uno nuevo en cada llamada.

    Returns:
        bytes: Sobre ``nonce || ciphertext || tag``.

    """

    compressed = compress(plaintext)
    if nonce is None:
        nonce = generate_nonce()
    sealed = aes_gcm_seal(key, nonce, compressed)
    logger.debug(
        "[ENCODE] deflate=%d->%d bytes AES-GCM-256 nonce=96-bit tag=128-bit",
        len(plaintext),
        len(compressed),
    )
    return nonce.value + sealed


def decode_envelope(key: SymmetricKey, envelope: bytes) -> bytes:
    """Verifica, descifra y descomprime un sobre binario.

    Args:
        key (SymmetricKey): Clave usada al sellar.
        envelope (bytes): Sobre producido por `encode_envelope`.

    Returns:
        bytes: Datos originales.

    Raises:
        EnvelopeFormatError: Si el sobre es más corto que el nonce.
        AuthenticationError: Si el tag no verifica.
        DecompressionError: Si la carga autenticada no es deflate válido.

    """

    if len(envelope) < NONCE_SIZE:
        raise EnvelopeFormatError(
            f"Sobre de {len(envelope)} bytes, menor que el nonce de {NONCE_SIZE}."
        )
    nonce = Nonce(value=envelope[:NONCE_SIZE])
    compressed = aes_gcm_open(key, nonce, envelope[NONCE_SIZE:])
    plaintext = decompress(compressed)
    logger.debug(
        "[DECODE] sobre=%d bytes tag=%d bytes inflate=%d->%d bytes",
        len(envelope),
        TAG_SIZE,
        len(compressed),
        len(plaintext),
    )
    return plaintext


class EnvelopePipeline:
    """Ejecuta una dirección del pipeline con la clave del `KeyStore`.

    Args:
        keystore (KeyStore): Origen de la clave activa.

    """

    def __init__(self, keystore: KeyStore) -> None:
        self.keystore = keystore

    def run(self, config: PipelineConfig) -> PipelineResult:
        """Procesa la entrada según la configuración resuelta.

        Args:
            config (PipelineConfig): Dirección, entrada y capa de texto.

        Returns:
            PipelineResult: Sobre (binario o texto) o datos recuperados.

        """

        key = self.keystore.obtain()
        if config.direction is Direction.ENCODE:
            return self._encode(key, config)
        return self._decode(key, config)

    def _encode(self, key: SymmetricKey, config: PipelineConfig) -> PipelineResult:
        envelope = encode_envelope(key, config.input_bytes)
        if not config.use_text_encoding:
            return PipelineResult(output_bytes=envelope, is_text=False)
        text = encode_text(envelope, config.encoding_scheme)
        return PipelineResult(output_bytes=text.encode("ascii"), is_text=True)

    def _decode(self, key: SymmetricKey, config: PipelineConfig) -> PipelineResult:
        envelope = config.input_bytes
        if config.use_text_encoding:
            envelope = decode_text(envelope, config.encoding_scheme)
        return PipelineResult(output_bytes=decode_envelope(key, envelope), is_text=False)
