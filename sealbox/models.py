# --------------------------------------------------------------
# File: models.py
# Description: Modelos inmutables de claves, nonces y configuración del pipeline.
# --------------------------------------------------------------
"""Modelos Pydantic que fijan el tamaño de los valores criptográficos."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

KEY_SIZE = 32  # AES-256
NONCE_SIZE = 12
TAG_SIZE = 16


class SymmetricKey(BaseModel):
    """Clave simétrica de 256 bits activa durante una ejecución.

    Attributes:
        material (bytes): Bytes en bruto de la clave, excluidos del `repr`.

    """

    model_config = ConfigDict(frozen=True)

    material: bytes = Field(repr=False)

    @field_validator("material")
    @classmethod
    def _check_size(cls, value: bytes) -> bytes:
        if len(value) != KEY_SIZE:
            raise ValueError(f"la clave debe tener {KEY_SIZE} bytes")
        return value


class Nonce(BaseModel):
    """Nonce de 96 bits de un único uso por operación de sellado.

    Attributes:
        value (bytes): Bytes del nonce.

    """

    model_config = ConfigDict(frozen=True)

    value: bytes

    @field_validator("value")
    @classmethod
    def _check_size(cls, value: bytes) -> bytes:
        if len(value) != NONCE_SIZE:
            raise ValueError(f"el nonce debe tener {NONCE_SIZE} bytes")
        return value


class Direction(str, Enum):
    ENCODE = "encode"
    DECODE = "decode"


class TextEncoding(str, Enum):
    HEX = "hex"
    BASE64 = "base64"


class PipelineConfig(BaseModel):
    """Configuración resuelta de una ejecución, construida una sola vez.

    Attributes:
        direction (Direction): Cifrar (`encode`) o descifrar (`decode`).
        input_bytes (bytes): Datos de entrada ya leídos.
        use_text_encoding (bool): Si el sobre viaja por un canal de texto.
        encoding_scheme (TextEncoding): Esquema de texto a aplicar o revertir.

    """

    model_config = ConfigDict(frozen=True)

    direction: Direction
    input_bytes: bytes = Field(repr=False)
    use_text_encoding: bool = False
    encoding_scheme: TextEncoding = TextEncoding.BASE64


class PipelineResult(BaseModel):
    """Salida del pipeline lista para escribirse en fichero o en pantalla."""

    model_config = ConfigDict(frozen=True)

    output_bytes: bytes = Field(repr=False)
    is_text: bool = False
