# --------------------------------------------------------------
# File: compression.py
# Description: Compresión deflate sin cabecera aplicada antes del cifrado.
# --------------------------------------------------------------
"""Códec deflate en bruto con nivel máximo de compresión."""

import zlib

from sealbox.errors import DecompressionError

# Deflate en bruto: sin cabecera zlib ni gzip.
_WBITS = -15


def compress(data: bytes) -> bytes:
    """Comprime datos con deflate al nivel 9."""

    compressor = zlib.compressobj(zlib.Z_BEST_COMPRESSION, zlib.DEFLATED, _WBITS)
    return compressor.compress(data) + compressor.flush()


def decompress(data: bytes) -> bytes:
    """Descomprime un flujo deflate completo.

    Args:
        data (bytes): Flujo producido por `compress`.

    Returns:
        bytes: Datos originales.

    Raises:
        DecompressionError: Si el flujo está malformado, truncado o seguido
        de bytes sobrantes.

    """

    decompressor = zlib.decompressobj(_WBITS)
    try:
        result = decompressor.decompress(data) + decompressor.flush()
    except zlib.error as exc:
        raise DecompressionError() from exc
    if not decompressor.eof or decompressor.unused_data:
        raise DecompressionError()
    return result
